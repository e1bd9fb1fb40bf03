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

from argparse import Namespace
from textwrap import dedent

import pytest

from snapinterfaces import errors, interfaces
from snapinterfaces.commands import (
    BaseDeclarationCommand,
    ConnectedPolicyCommand,
    ListInterfacesCommand,
)
from snapinterfaces.os_release import ReleaseInfo

UDEV_POLICY = dedent(
    """\
    ## udev: alpha
    # This file contains udev rules for FUSE filesystem.
    #
    # Do not edit this file, it will be overwritten on updates

    KERNEL=="fuse", TAG+="snap_alpha_alpha-app"
    """
)


@pytest.fixture
def snap_yaml(new_dir):
    snap_yaml = new_dir / "snap.yaml"
    snap_yaml.write_text(
        dedent(
            """\
            name: alpha
            version: "1.0"
            apps:
              alpha-app:
                command: bin/alpha
                plugs: [fuse-support]
            """
        )
    )
    return snap_yaml


@pytest.fixture
def registry(release_info):
    return interfaces.initialize(release_info)


@pytest.mark.usefixtures("registry")
def test_list_interfaces(emitter):
    cmd = ListInterfacesCommand(None)
    cmd.run(Namespace())
    emitter.assert_message(
        dedent(
            """\
        Interface     Summary
        ------------  -------------------------------------
        fuse-support  allows access to the FUSE file system"""
        )
    )


@pytest.mark.usefixtures("registry")
def test_base_declaration(emitter):
    cmd = BaseDeclarationCommand(None)
    cmd.run(Namespace())
    emitter.assert_message(
        dedent(
            """\
            type: base-declaration
            authority-id: canonical
            series: 16
            revision: 0
            plugs:
            slots:
              fuse-support:
                allow-installation:
                  slot-snap-type:
                    - core
                deny-auto-connection: true"""
        )
    )


class TestConnectedPolicy:
    """The connected-policy command."""

    @pytest.mark.usefixtures("registry")
    def test_udev(self, emitter, release_info, snap_yaml):
        cmd = ConnectedPolicyCommand({"release_info": release_info})
        cmd.run(Namespace(snap_yaml=snap_yaml, revision="12", backend="udev"))

        emitter.assert_message(UDEV_POLICY)

    @pytest.mark.usefixtures("registry")
    def test_all_backends(self, emitter, release_info, snap_yaml):
        cmd = ConnectedPolicyCommand({"release_info": release_info})
        cmd.run(Namespace(snap_yaml=snap_yaml, revision="12", backend=None))

        emitter.assert_message(UDEV_POLICY)
        emitter.assert_message(
            dedent(
                """\
                ## seccomp: snap.alpha.alpha-app
                # Description: Can run a FUSE filesystem. Unprivileged fuse mounts are
                # not supported at this time.

                mount
                """
            )
        )
        emitter.assert_message(
            dedent(
                """\
                ## apparmor: snap.alpha.alpha-app
                # Description: Can run a FUSE filesystem. Unprivileged fuse mounts are
                # not supported at this time.

                /dev/fuse rw,
                capability sys_admin,
                mount fstype=fuse.* options=(ro,nosuid,nodev) ** -> /home/*/snap/alpha/12/{,**/},
                mount fstype=fuse.* options=(rw,nosuid,nodev) ** -> /home/*/snap/alpha/12/{,**/},
                mount fstype=fuse.* options=(ro,nosuid,nodev) ** -> /var/snap/alpha/12/{,**/},
                mount fstype=fuse.* options=(rw,nosuid,nodev) ** -> /var/snap/alpha/12/{,**/},
                deny /etc/fuse.conf r,
                /sys/fs/fuse/ r,
                /sys/fs/fuse/** r,
                """
            )
        )

    def test_no_core_slot(self, emitter, snap_yaml):
        trusty = ReleaseInfo(id="ubuntu", version_id="14.04")
        interfaces.initialize(trusty)

        cmd = ConnectedPolicyCommand({"release_info": trusty})
        cmd.run(Namespace(snap_yaml=snap_yaml, revision="12", backend=None))

        emitter.assert_progress(
            "No 'core' slot for plug 'alpha:fuse-support', skipping", permanent=True
        )
        assert not [
            interaction
            for interaction in emitter.interactions
            if interaction.args[0] == "message"
        ]

    @pytest.mark.usefixtures("registry")
    def test_core_snap(self, release_info, new_dir):
        snap_yaml = new_dir / "snap.yaml"
        snap_yaml.write_text("name: core\ntype: os\n")

        cmd = ConnectedPolicyCommand({"release_info": release_info})

        with pytest.raises(errors.SnapInfoError) as raised:
            cmd.run(Namespace(snap_yaml=snap_yaml, revision="1", backend=None))

        assert str(raised.value) == "cannot show connected policy of the 'core' snap"

    @pytest.mark.usefixtures("registry")
    def test_unknown_interface(self, release_info, new_dir):
        snap_yaml = new_dir / "snap.yaml"
        snap_yaml.write_text("name: alpha\nplugs:\n  fuse: null\n")

        cmd = ConnectedPolicyCommand({"release_info": release_info})

        with pytest.raises(errors.UnknownInterfaceError):
            cmd.run(Namespace(snap_yaml=snap_yaml, revision="1", backend=None))
