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

"""Base declaration composition and evaluation.

The base declaration holds the default installation and auto-connection
policy of every interface. It is consulted alongside, not instead of,
``Interface.auto_connect``.
"""

from __future__ import annotations

import textwrap
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

import pydantic
import yaml
from craft_application import models
from craft_cli import emit

from snapinterfaces import errors
from snapinterfaces.snap import SnapType

if TYPE_CHECKING:
    from snapinterfaces.interfaces.base import Interface
    from snapinterfaces.snap import PlugInfo, SlotInfo

_HEADER = textwrap.dedent(
    """\
    type: base-declaration
    authority-id: canonical
    series: 16
    revision: 0
    """
)

# Names used by declarations for each snap type.
_DECLARATION_SNAP_TYPES = {
    SnapType.APP: "app",
    SnapType.GADGET: "gadget",
    SnapType.KERNEL: "kernel",
    SnapType.BASE: "base",
    SnapType.OS: "core",
    SnapType.SNAPD: "core",
}


class InstallationConstraints(models.CraftBaseModel):
    """Snap types a plug or slot may be installed on."""

    plug_snap_type: list[str] | None = None
    slot_snap_type: list[str] | None = None


class InterfaceRule(models.CraftBaseModel):
    """Base declaration rule for one side of one interface."""

    allow_installation: bool | InstallationConstraints = True
    deny_installation: bool = False
    allow_auto_connection: bool = True
    deny_auto_connection: bool = False


def compose_base_declaration(interfaces: Iterable[Interface]) -> str:
    """Assemble the base declaration text of the given interfaces."""
    plugs: list[str] = []
    slots: list[str] = []

    for iface in sorted(interfaces, key=lambda i: i.name):
        meta_data = iface.meta_data()
        if meta_data.base_declaration_plugs:
            plugs.append(textwrap.indent(meta_data.base_declaration_plugs, "  "))
        if meta_data.base_declaration_slots:
            slots.append(textwrap.indent(meta_data.base_declaration_slots, "  "))

    return "".join([_HEADER, "plugs:\n", *plugs, "slots:\n", *slots])


def _parse_rules(side: str, data: Any) -> dict[str, InterfaceRule]:
    if data is None:
        return {}

    if not isinstance(data, Mapping):
        raise errors.PolicyError(f"base declaration {side!r} must be a mapping")

    rules: dict[str, InterfaceRule] = {}
    for name, rule in data.items():
        if rule is None:
            rule = {}
        if not isinstance(rule, dict):
            raise errors.PolicyError(
                f"base declaration rule for {side[:-1]} {name!r} must be a mapping"
            )
        try:
            rules[name] = InterfaceRule.unmarshal(rule)
        except pydantic.ValidationError as err:
            raise errors.PolicyError(
                f"invalid base declaration rule for {side[:-1]} {name!r}: "
                f"{err.errors()[0]['msg']}"
            ) from err

    return rules


class BaseDeclaration:
    """Parsed base declaration.

    :param plug_rules: Rules for the plug side, keyed by interface name.
    :param slot_rules: Rules for the slot side, keyed by interface name.
    """

    def __init__(
        self,
        *,
        plug_rules: dict[str, InterfaceRule],
        slot_rules: dict[str, InterfaceRule],
    ) -> None:
        self._plug_rules = plug_rules
        self._slot_rules = slot_rules

    @classmethod
    def from_text(cls, text: str) -> BaseDeclaration:
        """Parse base declaration text.

        :raises PolicyError: If the text is not a valid base declaration.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise errors.PolicyError(f"cannot parse base declaration: {err}") from err

        if not isinstance(data, dict) or data.get("type") != "base-declaration":
            raise errors.PolicyError("assertion is not a base declaration")

        return cls(
            plug_rules=_parse_rules("plugs", data.get("plugs")),
            slot_rules=_parse_rules("slots", data.get("slots")),
        )

    @classmethod
    def from_interfaces(cls, interfaces: Iterable[Interface]) -> BaseDeclaration:
        """Compose and parse the base declaration of the given interfaces."""
        return cls.from_text(compose_base_declaration(interfaces))

    def plug_rule(self, interface_name: str) -> InterfaceRule:
        """Return the plug side rule, allowing everything if none is declared."""
        return self._plug_rules.get(interface_name, InterfaceRule())

    def slot_rule(self, interface_name: str) -> InterfaceRule:
        """Return the slot side rule, allowing everything if none is declared."""
        return self._slot_rules.get(interface_name, InterfaceRule())

    def check_plug_installation(self, plug: PlugInfo) -> None:
        """Check a plug may be installed.

        :raises PolicyError: If the base declaration denies it.
        """
        rule = self.plug_rule(plug.interface)
        _check_installation(
            "plug",
            plug.ref,
            plug.snap.type,
            rule,
            _constraint_types(rule, "plug_snap_type"),
        )

    def check_slot_installation(self, slot: SlotInfo) -> None:
        """Check a slot may be installed.

        :raises PolicyError: If the base declaration denies it.
        """
        rule = self.slot_rule(slot.interface)
        _check_installation(
            "slot",
            slot.ref,
            slot.snap.type,
            rule,
            _constraint_types(rule, "slot_snap_type"),
        )

    def auto_connection_allowed(
        self, iface: Interface, plug: PlugInfo, slot: SlotInfo
    ) -> bool:
        """Return whether plug and slot may be connected without consent.

        Both the declaration and the interface must agree.
        """
        for rule in (self.plug_rule(iface.name), self.slot_rule(iface.name)):
            if rule.deny_auto_connection or not rule.allow_auto_connection:
                emit.debug(
                    f"Base declaration denies auto-connection of {plug.ref!r} "
                    f"to {slot.ref!r}"
                )
                return False

        return iface.auto_connect(plug, slot)


def _constraint_types(rule: InterfaceRule, key: str) -> list[str] | None:
    if isinstance(rule.allow_installation, InstallationConstraints):
        return getattr(rule.allow_installation, key)
    return None


def _check_installation(
    kind: str,
    ref: str,
    snap_type: SnapType,
    rule: InterfaceRule,
    allowed_types: list[str] | None,
) -> None:
    if rule.deny_installation or rule.allow_installation is False:
        raise errors.PolicyError(f"installation of {kind} {ref!r} is denied")

    declared_type = _DECLARATION_SNAP_TYPES[snap_type]
    if allowed_types is not None and declared_type not in allowed_types:
        raise errors.PolicyError(
            f"installation of {kind} {ref!r} is not allowed on "
            f"{declared_type!r} snaps",
            resolution=f"{kind.capitalize()} can be installed on: "
            + ", ".join(allowed_types),
        )
