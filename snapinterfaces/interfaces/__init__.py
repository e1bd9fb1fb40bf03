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

"""Interface definitions and registry."""

from .base import Interface, MetaData, check_plug_interface, check_slot_interface
from .registry import (
    Registry,
    get_interface,
    get_interface_names,
    get_registry,
    initialize,
)

__all__ = [
    "Interface",
    "MetaData",
    "Registry",
    "check_plug_interface",
    "check_slot_interface",
    "get_interface",
    "get_interface_names",
    "get_registry",
    "initialize",
]
