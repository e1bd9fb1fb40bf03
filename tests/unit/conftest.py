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

import textwrap
from typing import Any, Dict

import pytest

from snapinterfaces.interfaces import Interface, MetaData, Registry, registry
from snapinterfaces.interfaces.builtin.fuse_support import FuseSupportInterface
from snapinterfaces.os_release import ReleaseInfo
from snapinterfaces.snap import SnapIdentity, SnapInfo, SnapType


@pytest.fixture(autouse=True)
def reset_registry(monkeypatch):
    """Start every test without a process-wide registry."""
    monkeypatch.setattr(registry, "_REGISTRY", None)


@pytest.fixture
def release_info():
    return ReleaseInfo(id="ubuntu", version_id="22.04")


@pytest.fixture
def core_release_info():
    return ReleaseInfo(id="ubuntu-core", version_id="22")


@pytest.fixture
def fuse_support(release_info):
    return FuseSupportInterface(release_info=release_info)


@pytest.fixture
def alpha_yaml_data() -> Dict[str, Any]:
    return {
        "name": "alpha",
        "version": "1.0",
        "apps": {
            "alpha-app": {"command": "bin/alpha", "plugs": ["fuse-support"]},
        },
    }


@pytest.fixture
def alpha(alpha_yaml_data):
    return SnapInfo.from_yaml_data(alpha_yaml_data, revision=12)


@pytest.fixture
def alpha_plug(alpha):
    return alpha.plugs["fuse-support"]


@pytest.fixture
def core(fuse_support, release_info):
    core = SnapInfo(
        identity=SnapIdentity(name="core", revision="1", type=SnapType.OS)
    )
    core.add_implicit_slots([fuse_support], release_info)
    return core


@pytest.fixture
def core_slot(core):
    return core.slots["fuse-support"]


@pytest.fixture
def fake_interface():
    class FakeInterface(Interface):
        """A fake interface granting a single file."""

        @property
        def name(self) -> str:
            return "fake"

        def meta_data(self) -> MetaData:
            return MetaData(
                summary="fake interface",
                implicit_on_core=True,
                implicit_on_classic=True,
                base_declaration_slots=textwrap.dedent(
                    """\
                    fake:
                      allow-installation:
                        slot-snap-type:
                          - core
                    """
                ),
            )

        def auto_connect(self, plug, slot) -> bool:
            return True

    return FakeInterface()


@pytest.fixture
def fake_registry(fuse_support, fake_interface):
    fake_registry = Registry()
    fake_registry.register(fuse_support)
    fake_registry.register(fake_interface)
    fake_registry.seal()
    return fake_registry
