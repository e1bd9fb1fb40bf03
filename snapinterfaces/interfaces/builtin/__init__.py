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

"""Interfaces shipped with snapinterfaces."""

from typing import List

from snapinterfaces.os_release import ReleaseInfo

from ..base import Interface
from .fuse_support import FuseSupportInterface


def get_builtin_interfaces(release_info: ReleaseInfo) -> List[Interface]:
    """Return an instance of every builtin interface.

    :param release_info: The release policy is generated for.
    """
    return [FuseSupportInterface(release_info=release_info)]


__all__ = ["FuseSupportInterface", "get_builtin_interfaces"]
