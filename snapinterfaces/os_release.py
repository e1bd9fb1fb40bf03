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

"""Host release identity.

Interfaces never look at the host themselves. The release identity is read
once, here, and handed to the interfaces that need it.
"""

import contextlib
from pathlib import Path
from typing import Dict

import pydantic
from craft_application import models
from craft_cli import emit

from snapinterfaces import errors

_UBUNTU_CORE_ID = "ubuntu-core"


class OsRelease:
    """Parsed contents of an os-release file."""

    def __init__(
        self,
        *,
        os_release_file: Path = Path(  # noqa: B008 Function call in arg defaults
            "/etc/os-release"
        ),
    ) -> None:
        """Create a new OsRelease instance.

        :param os_release_file: Path to os-release file to be parsed.
        """
        self._os_release: Dict[str, str] = {}
        with contextlib.suppress(FileNotFoundError):
            with os_release_file.open(encoding="utf-8") as release_file:
                for line in release_file:
                    entry = line.rstrip().split("=")
                    if len(entry) == 2:
                        self._os_release[entry[0]] = entry[1].strip('"')

    def id(self) -> str:
        """Return the OS ID.

        :raises SnapInterfacesError: If no ID can be determined.
        """
        with contextlib.suppress(KeyError):
            return self._os_release["ID"]

        raise errors.SnapInterfacesError("Unable to determine host OS ID")

    def name(self) -> str:
        """Return the OS name.

        :raises SnapInterfacesError: If no name can be determined.
        """
        with contextlib.suppress(KeyError):
            return self._os_release["NAME"]

        raise errors.SnapInterfacesError("Unable to determine host OS name")

    def version_id(self) -> str:
        """Return the OS version ID.

        :raises SnapInterfacesError: If no version ID can be determined.
        """
        with contextlib.suppress(KeyError):
            return self._os_release["VERSION_ID"]

        raise errors.SnapInterfacesError("Unable to determine host OS version ID")


class ReleaseInfo(models.CraftBaseModel):
    """Identity of the release the policy is generated for."""

    model_config = pydantic.ConfigDict(frozen=True)

    id: str
    version_id: str = ""

    @property
    def on_classic(self) -> bool:
        """Whether this is a classic (non Ubuntu Core) system."""
        return self.id != _UBUNTU_CORE_ID

    def matches(self, release_id: str, version_id: str) -> bool:
        """Return whether this is exactly the given release."""
        return self.id == release_id and self.version_id == version_id


def get_release_info(
    *,
    os_release_file: Path = Path(  # noqa: B008 Function call in arg defaults
        "/etc/os-release"
    ),
) -> ReleaseInfo:
    """Read the release identity of the host.

    Unknown fields degrade to a generic classic linux identity.
    """
    release = OsRelease(os_release_file=os_release_file)

    try:
        release_id = release.id()
    except errors.SnapInterfacesError:
        emit.debug(f"No release ID in {str(os_release_file)!r}, assuming 'linux'")
        release_id = "linux"

    version_id = ""
    with contextlib.suppress(errors.SnapInterfacesError):
        version_id = release.version_id()

    return ReleaseInfo(id=release_id, version_id=version_id)
