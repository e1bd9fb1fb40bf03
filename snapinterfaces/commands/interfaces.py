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

"""Interface discovery and policy commands."""

import argparse
import textwrap
from pathlib import Path
from typing import Dict, List

import tabulate
from craft_cli import BaseCommand, emit
from overrides import overrides
from pydantic import BaseModel

from snapinterfaces import errors, interfaces
from snapinterfaces.backends import SecuritySystem
from snapinterfaces.policy import compose_base_declaration
from snapinterfaces.repo import Repository
from snapinterfaces.snap import SnapIdentity, SnapInfo, SnapType

_CORE_SNAP = "core"


class InterfaceModel(BaseModel):
    """Interface model for presentation."""

    name: str
    summary: str

    def marshal(self) -> Dict[str, str]:
        """Marshal model into a dictionary for presentation."""
        return {"Interface": self.name, "Summary": self.summary}


class ListInterfacesCommand(BaseCommand):
    """List the available interfaces."""

    name = "list-interfaces"
    help_msg = "List available interfaces"
    overview = textwrap.dedent(
        """
        List the available interfaces and what they grant.
        """
    )

    @overrides
    def run(self, parsed_args: argparse.Namespace) -> None:
        printable_interfaces = [
            InterfaceModel(name=iface.name, summary=iface.meta_data().summary).marshal()
            for iface in interfaces.get_registry()
        ]
        emit.message(tabulate.tabulate(printable_interfaces, headers="keys"))


class BaseDeclarationCommand(BaseCommand):
    """Show the base declaration."""

    name = "base-declaration"
    help_msg = "Show the base declaration of the available interfaces"
    overview = textwrap.dedent(
        """
        Show the default installation and auto-connection policy of every
        available interface.
        """
    )

    @overrides
    def run(self, parsed_args: argparse.Namespace) -> None:
        emit.message(
            compose_base_declaration(interfaces.get_registry().interfaces()).rstrip()
        )


class ConnectedPolicyCommand(BaseCommand):
    """Show the policy a snap gets when its plugs are connected."""

    name = "connected-policy"
    help_msg = "Show the security policy of a snap with all plugs connected"
    overview = textwrap.dedent(
        """
        Load a snap.yaml, connect each of its plugs to the matching slot of
        the core snap and show the resulting policy for every backend.
        """
    )

    @overrides
    def fill_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "snap_yaml",
            metavar="snap-yaml",
            type=Path,
            help="Path to the snap.yaml file",
        )
        parser.add_argument(
            "--revision",
            required=True,
            help="Revision the snap is installed as",
        )
        parser.add_argument(
            "--backend",
            choices=[str(system) for system in SecuritySystem],
            help="Only show the policy of this backend",
        )

    @overrides
    def run(self, parsed_args: argparse.Namespace) -> None:
        registry = interfaces.get_registry()
        snap_info = SnapInfo.from_yaml_file(
            parsed_args.snap_yaml, revision=parsed_args.revision
        )
        if snap_info.name == _CORE_SNAP:
            raise errors.SnapInfoError(
                f"cannot show connected policy of the {_CORE_SNAP!r} snap"
            )

        core = SnapInfo(
            identity=SnapIdentity(name=_CORE_SNAP, revision="1", type=SnapType.OS)
        )
        core.add_implicit_slots(registry.interfaces(), self.config["release_info"])

        repo = Repository(registry)
        repo.add_snap(core)
        repo.add_snap(snap_info)

        for plug in sorted(snap_info.plugs.values(), key=lambda p: p.name):
            if plug.interface not in core.slots:
                emit.progress(
                    f"No {_CORE_SNAP!r} slot for plug {plug.ref!r}, skipping",
                    permanent=True,
                )
                continue
            repo.connect(plug.ref, f"{_CORE_SNAP}:{plug.interface}", consent=True)

        if parsed_args.backend:
            systems: List[SecuritySystem] = [SecuritySystem(parsed_args.backend)]
        else:
            systems = list(SecuritySystem)

        for system in systems:
            spec = repo.snap_specification(system, snap_info.name)
            for key, policy in spec.snippets().items():
                emit.message(f"## {system}: {key}\n{policy}\n")
