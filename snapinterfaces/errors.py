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

"""Error definitions.

Two families of errors exist. ``SnapInterfacesError`` and its subclasses are
user-facing: they describe bad input (a snap declaration, a base declaration)
and are reported back to whoever supplied it. ``ProgrammingError`` and its
subclasses describe an inconsistency in the calling code itself, such as an
interface being handed a plug of another interface. They are not meant to be
caught; the process must not keep operating on inconsistent security state.
"""

from craft_cli import CraftError


class SnapInterfacesError(CraftError):
    """Failure in a snap interfaces operation."""


class SnapInfoError(SnapInterfacesError):
    """Snap metadata is structurally invalid."""


class SanitizeError(SnapInterfacesError):
    """A plug or slot declaration is not valid for its interface.

    :param kind: Either "plug" or "slot".
    :param name: The plug or slot reference.
    :param message: The reason the declaration was rejected.
    """

    def __init__(self, *, kind: str, name: str, message: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(
            f"Invalid {kind} {name!r}: {message}",
            resolution=f"Fix the {kind} declaration in snap.yaml.",
        )


class SnippetError(SnapInterfacesError):
    """Policy fragments for a connection could not be generated."""


class UnknownInterfaceError(SnapInterfacesError):
    """The requested interface is not registered.

    :param interface_name: The name that failed to resolve.
    """

    def __init__(self, interface_name: str) -> None:
        self.interface_name = interface_name
        super().__init__(f"Interface {interface_name!r} does not exist")


class PolicyError(SnapInterfacesError):
    """The base declaration denies an operation or cannot be parsed."""


class InterfaceConnectionError(SnapInterfacesError):
    """A plug and slot could not be connected."""


class ProgrammingError(Exception):
    """Internal inconsistency in the calling code.

    Deliberately not a ``CraftError``: these are assertions, not
    conditions a user can correct.
    """


class InterfaceMismatch(ProgrammingError):
    """An interface was dispatched a plug or slot of another interface."""

    def __init__(self, *, kind: str, interface_name: str, declared: str) -> None:
        self.kind = kind
        self.interface_name = interface_name
        self.declared = declared
        super().__init__(
            f"{kind} is not of interface {interface_name!r} (declared {declared!r})"
        )


class RegistrySealed(ProgrammingError):
    """The interface registry was modified after initialization."""


class SpecificationFinalized(ProgrammingError):
    """A finalized or foreign specification was written to."""
