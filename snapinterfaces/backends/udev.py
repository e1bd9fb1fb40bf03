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

"""Udev rules and specification."""

import re
from typing import Annotated, ClassVar

import pydantic

from . import specification
from .specification import BaseSnippet, Rule, SecuritySystem

_KERNEL_REGEX = re.compile(r"[a-zA-Z0-9_*?\[\]-]+")
_TAG_REGEX = re.compile(r"[a-zA-Z0-9_-]+")


def udev_security_tag(snap_name: str, app_name: str) -> str:
    """Return the udev tag identifying the devices of a snap app.

    Snap and app names can contain neither "." nor "_", so the tag is
    distinct for every snap and app pair.
    """
    return f"snap_{snap_name}_{app_name}"


def _validate_kernel(kernel: str) -> str:
    if not _KERNEL_REGEX.fullmatch(kernel):
        raise ValueError(f"invalid kernel device match {kernel!r}")
    return kernel


def _validate_tag(tag: str) -> str:
    if not _TAG_REGEX.fullmatch(tag):
        raise ValueError(f"invalid udev tag {tag!r}")
    return tag


class TagRule(Rule):
    """Tag a kernel device: ``KERNEL=="<kernel>", TAG+="<tag>"``."""

    kernel: Annotated[str, pydantic.AfterValidator(_validate_kernel)]
    tag: Annotated[str, pydantic.AfterValidator(_validate_tag)]

    def render(self) -> str:
        """Return the rule in udev grammar."""
        return f'KERNEL=="{self.kernel}", TAG+="{self.tag}"'


class Snippet(BaseSnippet):
    """A group of udev rules."""

    rules: tuple[TagRule, ...]


class Specification(specification.Specification):
    """Udev rules for one snap.

    Udev rules are installed per snap rather than per app, the rules
    themselves carry the app specific tags.
    """

    security_system: ClassVar[SecuritySystem] = SecuritySystem.UDEV
    connected_plug_hook: ClassVar[str] = "udev_connected_plug"
    snippet_class: ClassVar[type[BaseSnippet]] = Snippet
    per_app: ClassVar[bool] = False
