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

"""Seccomp filter rules and specification."""

import re
from typing import Annotated, ClassVar

import pydantic

from . import specification
from .specification import BaseSnippet, Rule, SecuritySystem

_SYSCALL_REGEX = re.compile(r"[a-z_][a-z0-9_]*")


def _validate_syscall(name: str) -> str:
    if not _SYSCALL_REGEX.fullmatch(name):
        raise ValueError(f"invalid syscall name {name!r}")
    return name


class SyscallRule(Rule):
    """Allow one syscall, without argument filtering."""

    name: Annotated[str, pydantic.AfterValidator(_validate_syscall)]

    def render(self) -> str:
        """Return the rule in seccomp filter grammar."""
        return self.name


class Snippet(BaseSnippet):
    """A group of allowed syscalls."""

    rules: tuple[SyscallRule, ...]


class Specification(specification.Specification):
    """Seccomp filter policy for the apps of one snap."""

    security_system: ClassVar[SecuritySystem] = SecuritySystem.SECCOMP
    connected_plug_hook: ClassVar[str] = "seccomp_connected_plug"
    snippet_class: ClassVar[type[BaseSnippet]] = Snippet
