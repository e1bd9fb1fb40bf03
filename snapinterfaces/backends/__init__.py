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

"""Security backends policy is generated for."""

from . import apparmor, seccomp, udev
from .specification import SecuritySystem, Specification

_SPECIFICATIONS: dict[SecuritySystem, type[Specification]] = {
    SecuritySystem.APPARMOR: apparmor.Specification,
    SecuritySystem.SECCOMP: seccomp.Specification,
    SecuritySystem.UDEV: udev.Specification,
}


def new_specification(system: SecuritySystem, snap_name: str) -> Specification:
    """Create an empty specification for one compilation pass.

    :param system: The backend to create the specification for.
    :param snap_name: The snap being compiled.
    """
    return _SPECIFICATIONS[SecuritySystem(system)](snap_name)


__all__ = [
    "SecuritySystem",
    "Specification",
    "apparmor",
    "new_specification",
    "seccomp",
    "udev",
]
