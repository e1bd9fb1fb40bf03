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

"""Backend specification infrastructure.

A specification accumulates the policy one snap needs from one security
backend during a single compilation pass. Interfaces add typed rules to it;
the rules are rendered to the backend grammar only when the snippets are
read back.
"""

from __future__ import annotations

import abc
import contextlib
import enum
from collections.abc import Iterator
from typing import TYPE_CHECKING, ClassVar

import pydantic
from craft_application import models
from craft_cli import emit

from snapinterfaces import errors

if TYPE_CHECKING:
    from snapinterfaces.interfaces.base import Interface
    from snapinterfaces.snap import PlugInfo, SlotInfo


@enum.unique
class SecuritySystem(str, enum.Enum):
    """Security backends policy is generated for."""

    APPARMOR = "apparmor"
    SECCOMP = "seccomp"
    UDEV = "udev"

    def __str__(self) -> str:
        """Use the enum value as the string representation."""
        return self.value


class Rule(models.CraftBaseModel, abc.ABC):
    """A single policy rule, rendered to one line of backend grammar."""

    model_config = pydantic.ConfigDict(frozen=True)

    @abc.abstractmethod
    def render(self) -> str:
        """Return the rule in the backend grammar."""


class BaseSnippet(models.CraftBaseModel):
    """An ordered group of rules with an optional description."""

    model_config = pydantic.ConfigDict(frozen=True)

    description: str = ""
    rules: tuple[Rule, ...]

    def render(self) -> str:
        """Return the snippet in the backend grammar."""
        lines = [f"# {line}".rstrip() for line in self.description.splitlines()]
        if lines:
            lines.append("")
        lines.extend(rule.render() for rule in self.rules)
        return "\n".join(lines)


class Specification(abc.ABC):
    """Policy accumulated for one snap and one backend.

    :param snap_name: The snap the policy is compiled for.
    """

    security_system: ClassVar[SecuritySystem]
    connected_plug_hook: ClassVar[str]
    snippet_class: ClassVar[type[BaseSnippet]]
    per_app: ClassVar[bool] = True

    def __init__(self, snap_name: str) -> None:
        self.snap_name = snap_name
        self._snippets: dict[str, list[BaseSnippet]] = {}
        self._scope: tuple[str, ...] = ()
        self._finalized = False

    @property
    def finalized(self) -> bool:
        """Whether the specification is closed for writing."""
        return self._finalized

    def finalize(self) -> None:
        """Close the specification; later additions are programming errors."""
        self._finalized = True

    @contextlib.contextmanager
    def _scoped(self, security_tags: list[str]) -> Iterator[None]:
        self._scope = tuple(security_tags)
        try:
            yield
        finally:
            self._scope = ()

    def _keys(self) -> tuple[str, ...]:
        if self.per_app:
            return self._scope
        return (self.snap_name,)

    def add_snippet(self, snippet: BaseSnippet) -> None:
        """Add a snippet to every security tag in the current scope.

        Snippets already present for a tag are not added again.

        :raises SpecificationFinalized: If the specification was finalized.
        """
        if self._finalized:
            raise errors.SpecificationFinalized(
                f"{self.security_system} specification for {self.snap_name!r} "
                "is finalized"
            )

        if not isinstance(snippet, self.snippet_class):
            raise errors.ProgrammingError(
                f"{type(snippet).__name__} cannot be added to the "
                f"{self.security_system} specification of {self.snap_name!r}"
            )

        keys = self._keys()
        if not keys:
            emit.debug(
                f"Dropping {self.security_system} snippet for {self.snap_name!r}: "
                "no apps in scope"
            )

        for key in keys:
            bucket = self._snippets.setdefault(key, [])
            if snippet not in bucket:
                bucket.append(snippet)

    def add_connected_plug(
        self, iface: Interface, plug: PlugInfo, slot: SlotInfo
    ) -> None:
        """Run the interface hook of this backend for a connected plug.

        The hook sees copies of the plug and slot attributes and writes
        to the security tags of the apps bound to the plug.

        :raises ProgrammingError: If the plug is not of this snap.
        """
        if plug.snap.name != self.snap_name:
            raise errors.ProgrammingError(
                f"plug {plug.ref!r} cannot be compiled into the "
                f"{self.security_system} specification of {self.snap_name!r}"
            )

        hook = getattr(iface, self.connected_plug_hook)
        with self._scoped(plug.security_tags()):
            hook(self, plug, plug.attrs_copy(), slot, slot.attrs_copy())

        emit.trace(
            f"Added {self.security_system} policy for {plug.ref!r} -> {slot.ref!r}"
        )

    def security_tags(self) -> list[str]:
        """Return the keys snippets were added for, sorted."""
        return sorted(self._snippets)

    def snippets_for(self, key: str) -> list[str]:
        """Return the rendered snippets of one security tag."""
        return [snippet.render() for snippet in self._snippets.get(key, [])]

    def snippets(self) -> dict[str, str]:
        """Return the rendered policy of every security tag."""
        return {key: "\n\n".join(self.snippets_for(key)) for key in self.security_tags()}
