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

import pytest

from snapinterfaces import errors
from snapinterfaces.connection import Connection, ConnectionState
from snapinterfaces.snap import SlotInfo, SnapIdentity


@pytest.fixture
def connection(alpha_plug, core_slot):
    return Connection(plug=alpha_plug, slot=core_slot)


def test_connection(connection):
    assert connection.state == ConnectionState.DECLARED
    assert connection.interface == "fuse-support"
    assert connection.id == "alpha:fuse-support core:fuse-support"
    assert not connection.active


def test_interface_mismatch(alpha_plug):
    slot = SlotInfo(
        snap=SnapIdentity(name="core", revision="1", type="os"),
        name="network",
        interface="network",
    )

    with pytest.raises(errors.ProgrammingError):
        Connection(plug=alpha_plug, slot=slot)


@pytest.mark.parametrize(
    "states,active",
    [
        (["sanitized", "auto-connect-evaluated", "connected"], True),
        (["sanitized", "auto-connect-evaluated", "awaiting-consent"], False),
        (
            [
                "sanitized",
                "auto-connect-evaluated",
                "awaiting-consent",
                "connected",
                "policy-compiled",
            ],
            True,
        ),
        (
            [
                "sanitized",
                "auto-connect-evaluated",
                "connected",
                "policy-compiled",
                "policy-compiled",
                "disconnected",
            ],
            False,
        ),
    ],
)
def test_lifecycle(connection, states, active):
    for state in states:
        connection.advance(ConnectionState(state))

    assert connection.state == ConnectionState(states[-1])
    assert connection.active is active


@pytest.mark.parametrize(
    "states,bad_state",
    [
        ([], "connected"),
        ([], "auto-connect-evaluated"),
        (["sanitized"], "connected"),
        (["sanitized", "auto-connect-evaluated"], "policy-compiled"),
        (["sanitized", "auto-connect-evaluated", "awaiting-consent"], "policy-compiled"),
        (["sanitized", "auto-connect-evaluated", "connected", "disconnected"], "connected"),
    ],
)
def test_bad_transition(connection, states, bad_state):
    for state in states:
        connection.advance(ConnectionState(state))

    with pytest.raises(errors.ProgrammingError) as raised:
        connection.advance(ConnectionState(bad_state))

    assert str(raised.value).endswith(f"to {bad_state}")
    assert connection.state == ConnectionState(states[-1] if states else "declared")
