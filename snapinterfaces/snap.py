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

"""Snap, plug and slot metadata.

Every identifier that ends up substituted into generated policy (snap name,
revision, app name) is validated here, when the model is created.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any

import pydantic
import yaml
from craft_application import models
from craft_cli import emit

from snapinterfaces import errors

if TYPE_CHECKING:
    from snapinterfaces.interfaces.base import Interface
    from snapinterfaces.os_release import ReleaseInfo

SNAP_NAME_MAX_LENGTH = 40

_APP_NAME_REGEX = re.compile(r"[a-zA-Z0-9](?:-?[a-zA-Z0-9])*")
_PLUG_SLOT_NAME_REGEX = re.compile(r"[a-z](?:-?[a-z0-9])*")
_REVISION_REGEX = re.compile(r"x?[1-9][0-9]*")


def validate_name(*, name: str, field_name: str) -> str:
    """Validate a snap name.

    :param name: The name to validate.
    :param field_name: The name of the field being validated.

    :returns: The validated name.
    """
    if not re.fullmatch(r"[a-z0-9-]*[a-z][a-z0-9-]*", name):
        raise ValueError(
            f"{field_name} names can only use lowercase alphanumeric "
            "and hyphens and must have at least one letter"
        )

    if name.startswith("-"):
        raise ValueError(f"{field_name} names cannot start with a hyphen")

    if name.endswith("-"):
        raise ValueError(f"{field_name} names cannot end with a hyphen")

    if "--" in name:
        raise ValueError(f"{field_name} names cannot have two hyphens in a row")

    if len(name) > SNAP_NAME_MAX_LENGTH:
        raise ValueError(
            f"{field_name} names cannot be longer than {SNAP_NAME_MAX_LENGTH} characters"
        )

    return name


def _validate_snap_name(name: str) -> str:
    return validate_name(name=name, field_name="snap")


def _validate_app_name(name: str) -> str:
    if not _APP_NAME_REGEX.fullmatch(name):
        raise ValueError(
            f"invalid app name {name!r}: app names can only use ASCII letters, "
            "digits and non-consecutive hyphens"
        )
    return name


def _validate_plug_slot_name(name: str) -> str:
    if not _PLUG_SLOT_NAME_REGEX.fullmatch(name):
        raise ValueError(
            f"invalid name {name!r}: names must start with a lowercase letter and "
            "only use lowercase letters, digits and non-consecutive hyphens"
        )
    return name


def _validate_revision(revision: str) -> str:
    if not _REVISION_REGEX.fullmatch(revision):
        raise ValueError(
            f"invalid snap revision {revision!r}: must be a positive integer "
            "or 'x' followed by a positive integer"
        )
    return revision


def _freeze(value: Any) -> Any:
    """Return a read-only version of attribute data."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


SnapName = Annotated[str, pydantic.AfterValidator(_validate_snap_name)]
AppName = Annotated[str, pydantic.AfterValidator(_validate_app_name)]
PlugSlotName = Annotated[str, pydantic.AfterValidator(_validate_plug_slot_name)]
Revision = Annotated[str, pydantic.AfterValidator(_validate_revision)]
Attributes = Annotated[Mapping[str, Any], pydantic.AfterValidator(_freeze)]


class SnapType(str, enum.Enum):
    """The type of a snap."""

    APP = "app"
    GADGET = "gadget"
    KERNEL = "kernel"
    BASE = "base"
    OS = "os"
    SNAPD = "snapd"

    def __str__(self) -> str:
        """Use the enum value as the string representation."""
        return self.value


class SnapIdentity(models.CraftBaseModel):
    """The identity of an installed snap revision."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: SnapName
    revision: Revision
    type: SnapType = SnapType.APP

    def security_tag(self, app_name: str) -> str:
        """Return the security tag of one of the snap's apps."""
        return f"snap.{self.name}.{app_name}"


class _Endpoint(models.CraftBaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    snap: SnapIdentity
    name: PlugSlotName
    interface: PlugSlotName
    apps: frozenset[AppName] = frozenset()
    attrs: Attributes = pydantic.Field(default_factory=dict, validate_default=True)

    @property
    def ref(self) -> str:
        """Return the "<snap>:<name>" reference of this endpoint."""
        return f"{self.snap.name}:{self.name}"

    def security_tags(self) -> list[str]:
        """Return the security tags of the apps bound to this endpoint."""
        return [self.snap.security_tag(app) for app in sorted(self.apps)]

    def attrs_copy(self) -> dict[str, Any]:
        """Return a mutable copy of the attributes that is safe to hand out."""
        return _thaw(self.attrs)


class PlugInfo(_Endpoint):
    """A capability consumer declared by a snap."""


class SlotInfo(_Endpoint):
    """A capability provider declared by a snap."""


class SnapInfo(models.CraftBaseModel):
    """The interface-relevant parts of a snap's metadata."""

    identity: SnapIdentity
    apps: frozenset[AppName] = frozenset()
    plugs: dict[str, PlugInfo] = {}
    slots: dict[str, SlotInfo] = {}

    @property
    def name(self) -> str:
        """Return the snap name."""
        return self.identity.name

    @classmethod
    def from_yaml_data(cls, data: dict[str, Any], *, revision: str | int) -> SnapInfo:
        """Create a SnapInfo from snap.yaml data.

        Plugs and slots only mentioned by apps are implicitly declared with
        an interface of the same name. Top-level plugs and slots no app
        refers to are bound to every app.

        :param data: The loaded snap.yaml data.
        :param revision: The revision the snap is installed as.
        :raises SnapInfoError: If the data is invalid.
        """
        if not isinstance(data, dict):
            raise errors.SnapInfoError("snap.yaml data is not a dictionary")

        apps_data = data.get("apps") or {}
        if not isinstance(apps_data, dict):
            raise errors.SnapInfoError("'apps' in snap.yaml must be a dictionary")

        try:
            identity = SnapIdentity(
                name=data.get("name"),
                revision=str(revision),
                type=data.get("type", SnapType.APP),
            )
            apps = frozenset(
                pydantic.TypeAdapter(list[AppName]).validate_python(list(apps_data))
            )
        except pydantic.ValidationError as err:
            raise errors.SnapInfoError(_format_pydantic_errors(err.errors())) from err

        plugs_data = _load_endpoints("plug", data.get("plugs"))
        slots_data = _load_endpoints("slot", data.get("slots"))
        plug_bindings = _bind_endpoints("plugs", plugs_data, apps_data)
        slot_bindings = _bind_endpoints("slots", slots_data, apps_data)

        try:
            plugs = {
                name: PlugInfo(
                    snap=identity,
                    name=name,
                    interface=interface,
                    apps=plug_bindings[name] or apps,
                    attrs=attrs,
                )
                for name, (interface, attrs) in plugs_data.items()
            }
            slots = {
                name: SlotInfo(
                    snap=identity,
                    name=name,
                    interface=interface,
                    apps=slot_bindings[name] or apps,
                    attrs=attrs,
                )
                for name, (interface, attrs) in slots_data.items()
            }
        except pydantic.ValidationError as err:
            raise errors.SnapInfoError(_format_pydantic_errors(err.errors())) from err

        return cls(identity=identity, apps=apps, plugs=plugs, slots=slots)

    @classmethod
    def from_yaml_file(cls, path: Path, *, revision: str | int) -> SnapInfo:
        """Load a SnapInfo from a snap.yaml file.

        :raises SnapInfoError: If the file cannot be read or is invalid.
        """
        try:
            with path.open(encoding="utf-8") as yaml_file:
                data = yaml.safe_load(yaml_file)
        except OSError as err:
            raise errors.SnapInfoError(
                f"Cannot read {str(path)!r}: {err.strerror}"
            ) from err
        except yaml.YAMLError as err:
            raise errors.SnapInfoError(f"Cannot parse {str(path)!r}: {err}") from err

        return cls.from_yaml_data(data, revision=revision)

    def add_implicit_slots(
        self, interfaces: Iterable[Interface], release_info: ReleaseInfo
    ) -> None:
        """Add the slots the platform snap provides without declaring them.

        Only applies to the core and snapd snaps. Explicitly declared slots
        are left untouched.
        """
        if self.identity.type not in (SnapType.OS, SnapType.SNAPD):
            return

        for iface in interfaces:
            meta_data = iface.meta_data()
            if release_info.on_classic:
                implicit = meta_data.implicit_on_classic
            else:
                implicit = meta_data.implicit_on_core

            if not implicit or iface.name in self.slots:
                continue

            emit.debug(f"Adding implicit slot {iface.name!r} to {self.name!r}")
            self.slots[iface.name] = SlotInfo(
                snap=self.identity, name=iface.name, interface=iface.name
            )


def _load_endpoints(kind: str, endpoints: Any) -> dict[str, tuple[str, dict[str, Any]]]:
    if endpoints is None:
        return {}

    if not isinstance(endpoints, dict):
        raise errors.SnapInfoError(f"'{kind}s' in snap.yaml must be a dictionary")

    return {
        name: _parse_endpoint(kind, name, value) for name, value in endpoints.items()
    }


def _parse_endpoint(kind: str, name: str, value: Any) -> tuple[str, dict[str, Any]]:
    """Return the interface and attributes of a plug or slot declaration."""
    if value is None:
        return name, {}

    if isinstance(value, str):
        return value, {}

    if isinstance(value, dict):
        attrs = dict(value)
        interface = attrs.pop("interface", name)
        if not isinstance(interface, str):
            raise errors.SnapInfoError(
                f"interface name on {kind} {name!r} is not a string"
            )
        return interface, attrs

    raise errors.SnapInfoError(f"unknown syntax for {kind} {name!r}: {value!r}")


def _bind_endpoints(
    key: str,
    declared: dict[str, tuple[str, dict[str, Any]]],
    apps_data: dict[str, Any],
) -> dict[str, frozenset[str]]:
    """Map each plug or slot to the apps explicitly referring to it.

    Names only mentioned by apps are added to ``declared``.
    """
    bindings: dict[str, set[str]] = {name: set() for name in declared}

    for app_name, app_data in apps_data.items():
        if app_data is None:
            continue
        if not isinstance(app_data, dict):
            raise errors.SnapInfoError(
                f"app {app_name!r} in snap.yaml must be a dictionary"
            )

        names = app_data.get(key) or []
        if not isinstance(names, list):
            raise errors.SnapInfoError(
                f"'{key}' of app {app_name!r} in snap.yaml must be a list"
            )
        for name in names:
            if not isinstance(name, str):
                raise errors.SnapInfoError(
                    f"'{key}' of app {app_name!r} in snap.yaml must only list names, "
                    f"found {name!r}"
                )
            if name not in declared:
                declared[name] = (name, {})
                bindings[name] = set()
            bindings[name].add(app_name)

    return {name: frozenset(apps) for name, apps in bindings.items()}


def _format_pydantic_errors(
    pydantic_errors: Iterable[Any], *, file_name: str = "snap.yaml"
) -> str:
    """Format pydantic errors.

    Bad snap.yaml content:
    - <some reason> (in field <some field>)
    """
    combined = [f"Bad {file_name} content:"]
    for error in pydantic_errors:
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        if location:
            combined.append(f"- {message} (in field {location!r})")
        else:
            combined.append(f"- {message}")

    return "\n".join(combined)
