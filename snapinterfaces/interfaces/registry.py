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

"""Interface registry.

The process-wide registry is populated once, by :func:`initialize`, and is
read-only afterwards.
"""

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from craft_cli import emit

from snapinterfaces import errors
from snapinterfaces.os_release import ReleaseInfo, get_release_info

from .builtin import get_builtin_interfaces

if TYPE_CHECKING:
    from .base import Interface


class Registry:
    """A table of interfaces keyed by name."""

    def __init__(self) -> None:
        self._interfaces: Dict[str, "Interface"] = {}
        self._sealed = False

    @property
    def sealed(self) -> bool:
        """Whether the registry is closed for registration."""
        return self._sealed

    def register(self, iface: "Interface") -> None:
        """Register an interface.

        :param iface: the interface implementation.
        :raises RegistrySealed: if the registry was sealed.
        :raises ProgrammingError: if the name is already registered.
        """
        if self._sealed:
            raise errors.RegistrySealed(
                f"cannot register interface {iface.name!r}: registry is sealed"
            )

        if iface.name in self._interfaces:
            raise errors.ProgrammingError(
                f"interface {iface.name!r} is already registered"
            )

        self._interfaces[iface.name] = iface

    def seal(self) -> None:
        """Close the registry for registration."""
        self._sealed = True

    def get(self, name: str) -> "Interface":
        """Obtain an interface given the name.

        :param name: The interface name.
        :return: The interface.
        :raises UnknownInterfaceError: If the interface name is invalid.
        """
        try:
            return self._interfaces[name]
        except KeyError as key_error:
            raise errors.UnknownInterfaceError(name) from key_error

    def names(self) -> List[str]:
        """Return the sorted names of the registered interfaces."""
        return sorted(self._interfaces)

    def interfaces(self) -> List["Interface"]:
        """Return the registered interfaces, sorted by name."""
        return [self._interfaces[name] for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._interfaces

    def __iter__(self) -> Iterator["Interface"]:
        return iter(self.interfaces())

    def __len__(self) -> int:
        return len(self._interfaces)


_REGISTRY: Optional[Registry] = None


def initialize(release_info: Optional[ReleaseInfo] = None) -> Registry:
    """Populate and seal the process-wide registry.

    Must run before any connection is processed. Later calls return the
    registry created by the first one.

    :param release_info: The release policy is generated for, defaults to
        the host release.
    """
    global _REGISTRY  # pylint: disable=global-statement

    if _REGISTRY is not None:
        return _REGISTRY

    if release_info is None:
        release_info = get_release_info()

    registry = Registry()
    for iface in get_builtin_interfaces(release_info):
        registry.register(iface)
    registry.seal()

    emit.debug(
        f"Registered {len(registry)} interfaces for {release_info.id} "
        f"{release_info.version_id}".rstrip()
    )

    _REGISTRY = registry
    return registry


def get_registry() -> Registry:
    """Return the process-wide registry, initializing it if needed."""
    return initialize()


def get_interface(name: str) -> "Interface":
    """Obtain a registered interface given the name.

    :raises UnknownInterfaceError: If the interface name is invalid.
    """
    return get_registry().get(name)


def get_interface_names() -> List[str]:
    """Return the names of all registered interfaces."""
    return get_registry().names()
