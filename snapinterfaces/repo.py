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

"""Repository of snaps, their plugs and slots, and their connections.

The repository drives interfaces the way the rest of the system expects:
plugs and slots are sanitized when a snap is added, auto-connection is
evaluated before a connection is made, and backend specifications are
compiled from active connections only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from craft_cli import emit

from snapinterfaces import errors
from snapinterfaces.backends import SecuritySystem, Specification, new_specification
from snapinterfaces.connection import Connection, ConnectionState
from snapinterfaces.policy import BaseDeclaration

if TYPE_CHECKING:
    from snapinterfaces.interfaces.registry import Registry
    from snapinterfaces.snap import PlugInfo, SlotInfo, SnapInfo


def _split_ref(kind: str, ref: str) -> tuple[str, str]:
    snap_name, sep, name = ref.partition(":")
    if not sep or not snap_name or not name:
        raise errors.InterfaceConnectionError(
            f"invalid {kind} reference {ref!r}",
            resolution=f"Use the '<snap>:<{kind}>' form.",
        )
    return snap_name, name


class Repository:
    """Snaps known to the system and the connections between them.

    :param registry: The interfaces plugs and slots are dispatched to.
    :param base_declaration: The base declaration, composed from the
        registered interfaces if not given.
    """

    def __init__(
        self, registry: Registry, base_declaration: BaseDeclaration | None = None
    ) -> None:
        self._registry = registry
        if base_declaration is None:
            base_declaration = BaseDeclaration.from_interfaces(registry.interfaces())
        self._base_declaration = base_declaration
        self._snaps: dict[str, SnapInfo] = {}
        self._connections: dict[str, Connection] = {}

    def add_snap(self, snap_info: SnapInfo) -> None:
        """Add a snap after sanitizing all of its plugs and slots.

        A snap with an invalid plug or slot is rejected as a whole and
        leaves the repository untouched.

        :raises SanitizeError: If a plug or slot is invalid.
        :raises UnknownInterfaceError: If a plug or slot interface is unknown.
        :raises PolicyError: If the base declaration denies installation.
        """
        if snap_info.name in self._snaps:
            raise errors.SnapInfoError(
                f"snap {snap_info.name!r} is already in the repository"
            )

        for plug in snap_info.plugs.values():
            self._registry.get(plug.interface).sanitize_plug(plug)
            self._base_declaration.check_plug_installation(plug)

        for slot in snap_info.slots.values():
            self._registry.get(slot.interface).sanitize_slot(slot)
            self._base_declaration.check_slot_installation(slot)

        self._snaps[snap_info.name] = snap_info
        emit.debug(
            f"Added snap {snap_info.name!r} with {len(snap_info.plugs)} plugs "
            f"and {len(snap_info.slots)} slots"
        )

    def remove_snap(self, snap_name: str) -> None:
        """Remove a snap, disconnecting and forgetting all of its connections."""
        if snap_name not in self._snaps:
            raise errors.SnapInfoError(f"snap {snap_name!r} is not in the repository")

        for conn in list(self._connections.values()):
            if snap_name in (conn.plug.snap.name, conn.slot.snap.name):
                self.disconnect(conn.id)
                del self._connections[conn.id]

        del self._snaps[snap_name]

    def snap(self, snap_name: str) -> SnapInfo:
        """Return a snap of the repository."""
        try:
            return self._snaps[snap_name]
        except KeyError as key_error:
            raise errors.SnapInfoError(
                f"snap {snap_name!r} is not in the repository"
            ) from key_error

    def plug(self, ref: str) -> PlugInfo:
        """Return the plug for a "<snap>:<plug>" reference."""
        snap_name, name = _split_ref("plug", ref)
        snap_info = self._snaps.get(snap_name)
        if snap_info is None or name not in snap_info.plugs:
            raise errors.InterfaceConnectionError(f"snap has no plug {ref!r}")
        return snap_info.plugs[name]

    def slot(self, ref: str) -> SlotInfo:
        """Return the slot for a "<snap>:<slot>" reference."""
        snap_name, name = _split_ref("slot", ref)
        snap_info = self._snaps.get(snap_name)
        if snap_info is None or name not in snap_info.slots:
            raise errors.InterfaceConnectionError(f"snap has no slot {ref!r}")
        return snap_info.slots[name]

    def connections(self, snap_name: str | None = None) -> list[Connection]:
        """Return the connections, optionally only those of one snap."""
        return [
            conn
            for conn in sorted(self._connections.values(), key=lambda c: c.id)
            if snap_name is None
            or snap_name in (conn.plug.snap.name, conn.slot.snap.name)
        ]

    def connect(
        self, plug_ref: str, slot_ref: str, *, consent: bool = False
    ) -> Connection:
        """Connect a plug to a slot.

        Without consent the connection only becomes active if both the base
        declaration and the interface allow auto-connection, otherwise it
        waits for consent.

        :param plug_ref: The "<snap>:<plug>" reference.
        :param slot_ref: The "<snap>:<slot>" reference.
        :param consent: Whether the user explicitly asked for the connection.
        :raises InterfaceConnectionError: If the plug and slot cannot be paired.
        """
        plug = self.plug(plug_ref)
        slot = self.slot(slot_ref)

        if plug.interface != slot.interface:
            raise errors.InterfaceConnectionError(
                f"cannot connect plug {plug.ref!r} ({plug.interface}) to slot "
                f"{slot.ref!r} ({slot.interface})"
            )

        conn = Connection(plug=plug, slot=slot)
        existing = self._connections.get(conn.id)
        if existing is not None and existing.state != ConnectionState.DISCONNECTED:
            if consent and existing.state == ConnectionState.AWAITING_CONSENT:
                existing.advance(ConnectionState.CONNECTED)
            return existing

        iface = self._registry.get(plug.interface)
        conn.advance(ConnectionState.SANITIZED)

        auto_connect = self._base_declaration.auto_connection_allowed(
            iface, plug, slot
        )
        conn.advance(ConnectionState.AUTO_CONNECT_EVALUATED)

        if auto_connect or consent:
            conn.advance(ConnectionState.CONNECTED)
        else:
            conn.advance(ConnectionState.AWAITING_CONSENT)

        emit.debug(f"Connection {conn.id!r} is {conn.state}")
        self._connections[conn.id] = conn
        return conn

    def grant_consent(self, conn_id: str) -> Connection:
        """Activate a connection that was waiting for consent."""
        conn = self._get_connection(conn_id)
        if conn.state != ConnectionState.AWAITING_CONSENT:
            raise errors.InterfaceConnectionError(
                f"connection {conn_id!r} is not waiting for consent"
            )
        conn.advance(ConnectionState.CONNECTED)
        return conn

    def disconnect(self, conn_id: str) -> None:
        """Disconnect a connection."""
        conn = self._get_connection(conn_id)
        if conn.state != ConnectionState.DISCONNECTED:
            conn.advance(ConnectionState.DISCONNECTED)
            emit.debug(f"Disconnected {conn_id!r}")

    def _get_connection(self, conn_id: str) -> Connection:
        try:
            return self._connections[conn_id]
        except KeyError as key_error:
            raise errors.InterfaceConnectionError(
                f"connection {conn_id!r} does not exist"
            ) from key_error

    def snap_specification(self, system: SecuritySystem, snap_name: str) -> Specification:
        """Compile the policy of one backend for one snap.

        The returned specification is finalized.
        """
        snap_info = self.snap(snap_name)
        spec = new_specification(system, snap_info.name)

        active = [
            conn
            for conn in self.connections(snap_info.name)
            if conn.active and conn.plug.snap.name == snap_info.name
        ]
        for conn in active:
            spec.add_connected_plug(
                self._registry.get(conn.interface), conn.plug, conn.slot
            )
        spec.finalize()

        for conn in active:
            conn.advance(ConnectionState.POLICY_COMPILED)

        emit.debug(
            f"Compiled {system} policy for {snap_info.name!r} "
            f"from {len(active)} connections"
        )
        return spec

    def snap_specifications(self, snap_name: str) -> dict[SecuritySystem, Specification]:
        """Compile the policy of every backend for one snap."""
        return {
            system: self.snap_specification(system, snap_name)
            for system in SecuritySystem
        }
