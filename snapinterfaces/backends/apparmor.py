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

"""AppArmor profile rules and specification."""

import enum
import re
from typing import Annotated, ClassVar, Union

import pydantic

from . import specification
from .specification import BaseSnippet, Rule, SecuritySystem

CAPABILITIES = frozenset(
    {
        "audit_control",
        "audit_read",
        "audit_write",
        "block_suspend",
        "bpf",
        "checkpoint_restore",
        "chown",
        "dac_override",
        "dac_read_search",
        "fowner",
        "fsetid",
        "ipc_lock",
        "ipc_owner",
        "kill",
        "lease",
        "linux_immutable",
        "mac_admin",
        "mac_override",
        "mknod",
        "net_admin",
        "net_bind_service",
        "net_broadcast",
        "net_raw",
        "perfmon",
        "setfcap",
        "setgid",
        "setpcap",
        "setuid",
        "sys_admin",
        "sys_boot",
        "sys_chroot",
        "sys_module",
        "sys_nice",
        "sys_pacct",
        "sys_ptrace",
        "sys_rawio",
        "sys_resource",
        "sys_time",
        "sys_tty_config",
        "syslog",
        "wake_alarm",
    }
)
"""Capability names understood by AppArmor."""

_PERMISSION_LETTERS = frozenset("rwalkmxiuUpPcC")
_EXEC_MODIFIERS = frozenset("iuUpPcC")
_FSTYPE_REGEX = re.compile(r"[a-z0-9_.*]+")


def _validate_permissions(permissions: str) -> str:
    if not permissions or not set(permissions) <= _PERMISSION_LETTERS:
        raise ValueError(f"invalid AppArmor permissions {permissions!r}")

    if set(permissions) & _EXEC_MODIFIERS and "x" not in permissions:
        raise ValueError(
            f"invalid AppArmor permissions {permissions!r}: "
            "execute modifiers require 'x'"
        )

    if "w" in permissions and "a" in permissions:
        raise ValueError(
            f"invalid AppArmor permissions {permissions!r}: 'w' and 'a' conflict"
        )

    return permissions


def _validate_path(path: str) -> str:
    """Reject paths that could terminate or escape the rule they are part of.

    Commas are only allowed inside alternations, eg. ``{,**/}``.
    """
    if not path.startswith(("/", "@{", "**")):
        raise ValueError(f"AppArmor path {path!r} must be absolute")

    depth = 0
    for char in path:
        if char.isspace() or char in "\"#\0":
            raise ValueError(f"invalid character {char!r} in AppArmor path {path!r}")
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced braces in AppArmor path {path!r}")
        elif char == "," and depth == 0:
            raise ValueError(f"unexpected comma in AppArmor path {path!r}")

    if depth != 0:
        raise ValueError(f"unbalanced braces in AppArmor path {path!r}")

    return path


def _validate_capability(name: str) -> str:
    if name not in CAPABILITIES:
        raise ValueError(f"unknown capability {name!r}")
    return name


def _validate_fstype(fstype: str) -> str:
    if not _FSTYPE_REGEX.fullmatch(fstype):
        raise ValueError(f"invalid filesystem type {fstype!r}")
    return fstype


Permissions = Annotated[str, pydantic.AfterValidator(_validate_permissions)]
ProfilePath = Annotated[str, pydantic.AfterValidator(_validate_path)]


@enum.unique
class MountOptions(str, enum.Enum):
    """The only mount option sets rules may allow.

    ``nosuid`` and ``nodev`` are always part of the set.
    """

    READ_ONLY = "ro,nosuid,nodev"
    READ_WRITE = "rw,nosuid,nodev"

    def __str__(self) -> str:
        """Use the enum value as the string representation."""
        return self.value


class FileRule(Rule):
    """Allow access to a path: ``<path> <permissions>,``."""

    path: ProfilePath
    permissions: Permissions

    def render(self) -> str:
        """Return the rule in AppArmor grammar."""
        return f"{self.path} {self.permissions},"


class DenyRule(Rule):
    """Explicitly deny access to a path: ``deny <path> <permissions>,``."""

    path: ProfilePath
    permissions: Permissions

    def render(self) -> str:
        """Return the rule in AppArmor grammar."""
        return f"deny {self.path} {self.permissions},"


class CapabilityRule(Rule):
    """Grant a capability: ``capability <name>,``."""

    name: Annotated[str, pydantic.AfterValidator(_validate_capability)]

    def render(self) -> str:
        """Return the rule in AppArmor grammar."""
        return f"capability {self.name},"


class MountRule(Rule):
    """Allow a mount with one of the sanctioned option sets."""

    fstype: Annotated[str, pydantic.AfterValidator(_validate_fstype)]
    options: MountOptions
    source: ProfilePath
    destination: ProfilePath

    def render(self) -> str:
        """Return the rule in AppArmor grammar."""
        return (
            f"mount fstype={self.fstype} options=({self.options}) "
            f"{self.source} -> {self.destination},"
        )


AppArmorRule = Union[FileRule, DenyRule, CapabilityRule, MountRule]


class Snippet(BaseSnippet):
    """A group of AppArmor rules."""

    rules: tuple[AppArmorRule, ...]


class Specification(specification.Specification):
    """AppArmor policy for the apps of one snap."""

    security_system: ClassVar[SecuritySystem] = SecuritySystem.APPARMOR
    connected_plug_hook: ClassVar[str] = "apparmor_connected_plug"
    snippet_class: ClassVar[type[BaseSnippet]] = Snippet
