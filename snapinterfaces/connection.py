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

"""Connection lifecycle."""

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet

from snapinterfaces import errors
from snapinterfaces.snap import PlugInfo, SlotInfo


@enum.unique
class ConnectionState(str, enum.Enum):
    """States a plug to slot connection goes through."""

    DECLARED = "declared"
    SANITIZED = "sanitized"
    AUTO_CONNECT_EVALUATED = "auto-connect-evaluated"
    AWAITING_CONSENT = "awaiting-consent"
    CONNECTED = "connected"
    POLICY_COMPILED = "policy-compiled"
    DISCONNECTED = "disconnected"

    def __str__(self) -> str:
        """Use the enum value as the string representation."""
        return self.value


_TRANSITIONS: Dict[ConnectionState, FrozenSet[ConnectionState]] = {
    ConnectionState.DECLARED: frozenset({ConnectionState.SANITIZED}),
    ConnectionState.SANITIZED: frozenset({ConnectionState.AUTO_CONNECT_EVALUATED}),
    ConnectionState.AUTO_CONNECT_EVALUATED: frozenset(
        {ConnectionState.CONNECTED, ConnectionState.AWAITING_CONSENT}
    ),
    ConnectionState.AWAITING_CONSENT: frozenset(
        {ConnectionState.CONNECTED, ConnectionState.DISCONNECTED}
    ),
    ConnectionState.CONNECTED: frozenset(
        {ConnectionState.POLICY_COMPILED, ConnectionState.DISCONNECTED}
    ),
    ConnectionState.POLICY_COMPILED: frozenset(
        {ConnectionState.POLICY_COMPILED, ConnectionState.DISCONNECTED}
    ),
    ConnectionState.DISCONNECTED: frozenset(),
}


@dataclass
class Connection:
    """A plug paired with a slot of the same interface."""

    plug: PlugInfo
    slot: SlotInfo
    state: ConnectionState = field(default=ConnectionState.DECLARED)

    def __post_init__(self) -> None:
        if self.plug.interface != self.slot.interface:
            raise errors.ProgrammingError(
                f"cannot pair plug {self.plug.ref!r} of interface "
                f"{self.plug.interface!r} with slot {self.slot.ref!r} of interface "
                f"{self.slot.interface!r}"
            )

    @property
    def interface(self) -> str:
        """Return the interface name of the connection."""
        return self.plug.interface

    @property
    def id(self) -> str:
        """Return the connection identifier, "<snap>:<plug> <snap>:<slot>"."""
        return f"{self.plug.ref} {self.slot.ref}"

    @property
    def active(self) -> bool:
        """Whether the connection grants its capability."""
        return self.state in (ConnectionState.CONNECTED, ConnectionState.POLICY_COMPILED)

    def advance(self, state: ConnectionState) -> None:
        """Move the connection to a new state.

        :raises ProgrammingError: If the transition is not allowed.
        """
        if state not in _TRANSITIONS[self.state]:
            raise errors.ProgrammingError(
                f"connection {self.id!r} cannot go from {self.state} to {state}"
            )
        self.state = state
