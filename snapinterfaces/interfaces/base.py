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

"""Interface base class definition."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

import pydantic
from craft_application import models

from snapinterfaces import errors

if TYPE_CHECKING:
    from snapinterfaces.backends import apparmor, seccomp, udev
    from snapinterfaces.snap import PlugInfo, SlotInfo


class MetaData(models.CraftBaseModel):
    """Static description of an interface.

    :param summary: Human readable summary of what the interface grants.
    :param implicit_on_core: Whether the core snap provides the slot on
        Ubuntu Core systems.
    :param implicit_on_classic: Whether the core snap provides the slot on
        classic systems.
    :param base_declaration_plugs: Base declaration text for the plug side.
    :param base_declaration_slots: Base declaration text for the slot side.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    summary: str
    implicit_on_core: bool = False
    implicit_on_classic: bool = False
    base_declaration_plugs: str = ""
    base_declaration_slots: str = ""


def check_plug_interface(iface: Interface, plug: PlugInfo) -> None:
    """Assert the plug was dispatched to the interface it declares.

    :raises InterfaceMismatch: If it was not.
    """
    if plug.interface != iface.name:
        raise errors.InterfaceMismatch(
            kind="plug", interface_name=iface.name, declared=plug.interface
        )


def check_slot_interface(iface: Interface, slot: SlotInfo) -> None:
    """Assert the slot was dispatched to the interface it declares.

    :raises InterfaceMismatch: If it was not.
    """
    if slot.interface != iface.name:
        raise errors.InterfaceMismatch(
            kind="slot", interface_name=iface.name, declared=slot.interface
        )


class Interface(abc.ABC):
    """Interface is the class from which all interfaces inherit.

    An interface validates the plugs and slots that declare it, adds policy
    to the backend specifications of connected plugs and decides whether a
    connection may be made without asking.

    Implementations must not keep mutable state: the same instance serves
    every snap for the lifetime of the process.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Return the interface name, used as the registry key."""

    @abc.abstractmethod
    def meta_data(self) -> MetaData:
        """Return the static interface description."""

    def sanitize_plug(self, plug: PlugInfo) -> None:
        """Validate a plug declaration.

        :raises SanitizeError: If the plug attributes are invalid.
        :raises InterfaceMismatch: If the plug is of another interface.
        """
        check_plug_interface(self, plug)

    def sanitize_slot(self, slot: SlotInfo) -> None:
        """Validate a slot declaration.

        :raises SanitizeError: If the slot attributes are invalid.
        :raises InterfaceMismatch: If the slot is of another interface.
        """
        check_slot_interface(self, slot)

    def apparmor_connected_plug(
        self,
        spec: apparmor.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Add AppArmor policy for the apps of a connected plug."""

    def seccomp_connected_plug(
        self,
        spec: seccomp.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Add seccomp policy for the apps of a connected plug."""

    def udev_connected_plug(
        self,
        spec: udev.Specification,
        plug: PlugInfo,
        plug_attrs: dict[str, Any],
        slot: SlotInfo,
        slot_attrs: dict[str, Any],
    ) -> None:
        """Add udev rules for the apps of a connected plug."""

    def auto_connect(self, plug: PlugInfo, slot: SlotInfo) -> bool:
        """Return whether the plug and slot may connect without consent.

        The base declaration is consulted separately and may still deny it.
        """
        return False

    def __str__(self) -> str:
        """Use the interface name as the string representation."""
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
