# -*- Mode:Python; indent-tabs-mode:nil; tab-width:4 -*-
#
# Copyright 2026 Canonical Ltd.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License version 3 as
# published by the Free Software Foundation.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

"""The fuse-support interface.

Lets a snap run a FUSE filesystem. Unprivileged fuse mounts are not
supported, so the snap gets the privileges to mount by itself, restricted
to its own writable directories and to the default safe mount options.
"""

import textwrap
from typing import Any

from snapinterfaces.backends import apparmor, seccomp, udev
from snapinterfaces.os_release import ReleaseInfo
from snapinterfaces.snap import PlugInfo, SlotInfo

from ..base import Interface, MetaData

_SUMMARY = "allows access to the FUSE file system"

_BASE_DECLARATION_SLOTS = textwrap.dedent(
    """\
      fuse-support:
        allow-installation:
          slot-snap-type:
            - core
        deny-auto-connection: true
    """
)

_DESCRIPTION = (
    "Description: Can run a FUSE filesystem. Unprivileged fuse mounts are\n"
    "not supported at this time."
)

_UDEV_DESCRIPTION = (
    "This file contains udev rules for FUSE filesystem.\n"
    "\n"
    "Do not edit this file, it will be overwritten on updates"
)

# Fuse supports lots of mount options and applications do not have to go
# through fusermount, so only the default (rw,nosuid,nodev) and read-only
# variants are allowed.
_MOUNT_OPTIONS = (apparmor.MountOptions.READ_ONLY, apparmor.MountOptions.READ_WRITE)


def _writable_dirs(snap_name: str, revision: str) -> tuple[str, str]:
    """Return the snap specific directories fuse filesystems can be mounted on."""
    return (
        f"/home/*/snap/{snap_name}/{revision}/",
        f"/var/snap/{snap_name}/{revision}/",
    )


class FuseSupportInterface(Interface):
    """Allow running FUSE filesystems.

    :param release_info: The release the policy is generated for. Ubuntu
        14.04 classic systems do not provide the slot implicitly.
    """

    def __init__(self, *, release_info: ReleaseInfo) -> None:
        self._meta_data = MetaData(
            summary=_SUMMARY,
            implicit_on_core=True,
            implicit_on_classic=not release_info.matches("ubuntu", "14.04"),
            base_declaration_slots=_BASE_DECLARATION_SLOTS,
        )

    @property
    def name(self) -> str:
        """Return the interface name."""
        return "fuse-support"

    def meta_data(self) -> MetaData:
        """Return the static interface description."""
        return self._meta_data

    def apparmor_connected_plug(
        self,
        spec: apparmor.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Allow mounting fuse filesystems in the snap's writable directories."""
        rules: list[apparmor.AppArmorRule] = [
            # https://www.kernel.org/doc/Documentation/filesystems/fuse.txt
            apparmor.FileRule(path="/dev/fuse", permissions="rw"),
            apparmor.CapabilityRule(name="sys_admin"),
        ]

        # The fstype is 'fuse.<command>', eg. 'fuse.sshfs'. Local fuse mounts
        # are mediated on the underlying source files, so any source is fine.
        for directory in _writable_dirs(plug.snap.name, plug.snap.revision):
            for options in _MOUNT_OPTIONS:
                rules.append(
                    apparmor.MountRule(
                        fstype="fuse.*",
                        options=options,
                        source="**",
                        destination=f"{directory}{{,**/}}",
                    )
                )

        rules.extend(
            [
                # Keep the host configuration from overriding the safe defaults
                # enforced by the mount rules above.
                apparmor.DenyRule(path="/etc/fuse.conf", permissions="r"),
                apparmor.FileRule(path="/sys/fs/fuse/", permissions="r"),
                apparmor.FileRule(path="/sys/fs/fuse/**", permissions="r"),
            ]
        )

        spec.add_snippet(apparmor.Snippet(description=_DESCRIPTION, rules=rules))

    def seccomp_connected_plug(
        self,
        spec: seccomp.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Allow the mount syscall."""
        spec.add_snippet(
            seccomp.Snippet(
                description=_DESCRIPTION, rules=[seccomp.SyscallRule(name="mount")]
            )
        )

    def udev_connected_plug(
        self,
        spec: udev.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Tag /dev/fuse for every app of the plug."""
        for app_name in sorted(plug.apps):
            tag = udev.udev_security_tag(plug.snap.name, app_name)
            spec.add_snippet(
                udev.Snippet(
                    description=_UDEV_DESCRIPTION,
                    rules=[udev.TagRule(kernel="fuse", tag=tag)],
                )
            )

    def auto_connect(self, plug: PlugInfo, slot: SlotInfo) -> bool:
        """Allow what the base declaration allows."""
        return True
