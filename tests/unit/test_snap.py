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

from textwrap import dedent

import pydantic
import pytest

from snapinterfaces import errors
from snapinterfaces.interfaces.builtin.fuse_support import FuseSupportInterface
from snapinterfaces.os_release import ReleaseInfo
from snapinterfaces.snap import (
    PlugInfo,
    SnapIdentity,
    SnapInfo,
    SnapType,
    validate_name,
)


class TestNames:
    """Identifier validation."""

    @pytest.mark.parametrize("name", ["alpha", "a1", "1a", "my-snap", "a" * 40])
    def test_valid_snap_name(self, name):
        assert validate_name(name=name, field_name="snap") == name

    @pytest.mark.parametrize(
        "name,message",
        [
            ("Alpha", "snap names can only use lowercase alphanumeric"),
            ("123", "snap names can only use lowercase alphanumeric"),
            ("al.pha", "snap names can only use lowercase alphanumeric"),
            ("al_pha", "snap names can only use lowercase alphanumeric"),
            ("-alpha", "snap names cannot start with a hyphen"),
            ("alpha-", "snap names cannot end with a hyphen"),
            ("al--pha", "snap names cannot have two hyphens in a row"),
            ("a" * 41, "snap names cannot be longer than 40 characters"),
        ],
    )
    def test_invalid_snap_name(self, name, message):
        with pytest.raises(ValueError) as raised:
            validate_name(name=name, field_name="snap")

        assert str(raised.value).startswith(message)

    @pytest.mark.parametrize("revision", ["1", "12", "x1", "x42"])
    def test_valid_revision(self, revision):
        assert SnapIdentity(name="alpha", revision=revision).revision == revision

    @pytest.mark.parametrize("revision", ["0", "012", "-1", "x", "1/../2", "1 2"])
    def test_invalid_revision(self, revision):
        with pytest.raises(pydantic.ValidationError) as raised:
            SnapIdentity(name="alpha", revision=revision)

        assert "invalid snap revision" in str(raised.value)

    def test_integer_revision(self):
        assert SnapIdentity(name="alpha", revision=12).revision == "12"

    @pytest.mark.parametrize("app", ["alpha_app", "app.1", "-app", "app--x", "a/b"])
    def test_invalid_app_name(self, app):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "apps": {app: {}}}, revision=1
            )

        assert "invalid app name" in str(raised.value)

    @pytest.mark.parametrize("name", ["Fuse", "1fuse", "fuse_support", "-fuse"])
    def test_invalid_plug_name(self, name):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "plugs": {name: "fuse-support"}}, revision=1
            )

        assert f"invalid name {name!r}" in str(raised.value)


class TestSnapIdentity:
    """Snap identity and security tags."""

    def test_security_tag(self):
        identity = SnapIdentity(name="alpha", revision="12")

        assert identity.security_tag("alpha-app") == "snap.alpha.alpha-app"

    def test_default_type(self):
        assert SnapIdentity(name="alpha", revision="1").type == SnapType.APP

    def test_frozen(self):
        identity = SnapIdentity(name="alpha", revision="1")

        with pytest.raises(pydantic.ValidationError):
            identity.name = "beta"


class TestEndpoints:
    """Plug and slot information."""

    def test_ref(self, alpha_plug):
        assert alpha_plug.ref == "alpha:fuse-support"

    def test_security_tags_sorted(self):
        plug = PlugInfo(
            snap=SnapIdentity(name="alpha", revision="1"),
            name="fuse-support",
            interface="fuse-support",
            apps=frozenset({"zeta", "beta", "gamma"}),
        )

        assert plug.security_tags() == [
            "snap.alpha.beta",
            "snap.alpha.gamma",
            "snap.alpha.zeta",
        ]

    def test_attrs_copy(self):
        plug = PlugInfo(
            snap=SnapIdentity(name="alpha", revision="1"),
            name="fuse-support",
            interface="fuse-support",
            attrs={"paths": ["/one"], "nested": {"key": "value"}},
        )

        attrs = plug.attrs_copy()
        attrs["paths"].append("/two")
        attrs["nested"]["key"] = "other"

        assert attrs == {"paths": ["/one", "/two"], "nested": {"key": "other"}}
        assert plug.attrs_copy() == {"paths": ["/one"], "nested": {"key": "value"}}

    def test_attrs_read_only(self):
        plug = PlugInfo(
            snap=SnapIdentity(name="alpha", revision="1"),
            name="fuse-support",
            interface="fuse-support",
            attrs={"paths": ["/one"], "nested": {"key": "value"}},
        )

        with pytest.raises(TypeError):
            plug.attrs["x"] = 2  # type: ignore[index]
        with pytest.raises(TypeError):
            plug.attrs["nested"]["key"] = "other"
        with pytest.raises(AttributeError):
            plug.attrs["paths"].append("/two")

        assert "x" not in plug.attrs
        assert plug.attrs["paths"] == ("/one",)
        assert plug.attrs["nested"] == {"key": "value"}

    def test_default_attrs_read_only(self):
        plug = PlugInfo(
            snap=SnapIdentity(name="alpha", revision="1"),
            name="fuse-support",
            interface="fuse-support",
        )

        with pytest.raises(TypeError):
            plug.attrs["x"] = 2  # type: ignore[index]


class TestFromYamlData:
    """Loading snap.yaml data."""

    def test_implicit_app_plug(self, alpha):
        assert alpha.name == "alpha"
        assert alpha.identity.revision == "12"
        assert alpha.apps == frozenset({"alpha-app"})

        plug = alpha.plugs["fuse-support"]
        assert plug.interface == "fuse-support"
        assert plug.apps == frozenset({"alpha-app"})
        assert plug.attrs == {}
        assert plug.security_tags() == ["snap.alpha.alpha-app"]

    def test_top_level_plug_binds_all_apps(self):
        snap_info = SnapInfo.from_yaml_data(
            {
                "name": "alpha",
                "apps": {"one": {}, "two": {"plugs": ["network"]}},
                "plugs": {"fuse": {"interface": "fuse-support", "key": "value"}},
            },
            revision=3,
        )

        fuse = snap_info.plugs["fuse"]
        assert fuse.interface == "fuse-support"
        assert fuse.apps == frozenset({"one", "two"})
        assert fuse.attrs == {"key": "value"}
        assert snap_info.plugs["network"].apps == frozenset({"two"})

    def test_top_level_plug_bound_by_app(self):
        snap_info = SnapInfo.from_yaml_data(
            {
                "name": "alpha",
                "apps": {"one": {"plugs": ["fuse"]}, "two": {}},
                "plugs": {"fuse": "fuse-support"},
            },
            revision=3,
        )

        assert snap_info.plugs["fuse"].interface == "fuse-support"
        assert snap_info.plugs["fuse"].apps == frozenset({"one"})

    def test_null_plug_uses_name_as_interface(self):
        snap_info = SnapInfo.from_yaml_data(
            {"name": "alpha", "plugs": {"fuse-support": None}}, revision=1
        )

        assert snap_info.plugs["fuse-support"].interface == "fuse-support"
        assert snap_info.plugs["fuse-support"].apps == frozenset()

    def test_slots(self):
        snap_info = SnapInfo.from_yaml_data(
            {
                "name": "provider",
                "apps": {"daemon": {"slots": ["fuse-support"]}},
            },
            revision=1,
        )

        assert snap_info.slots["fuse-support"].apps == frozenset({"daemon"})
        assert snap_info.plugs == {}

    def test_type(self):
        snap_info = SnapInfo.from_yaml_data({"name": "core", "type": "os"}, revision=1)

        assert snap_info.identity.type == SnapType.OS

    def test_not_a_dict(self):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(["alpha"], revision=1)  # type: ignore[arg-type]

        assert str(raised.value) == "snap.yaml data is not a dictionary"

    def test_bad_name(self):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data({"name": "Alpha"}, revision=1)

        assert str(raised.value) == (
            "Bad snap.yaml content:\n"
            "- snap names can only use lowercase alphanumeric and hyphens and "
            "must have at least one letter (in field 'name')"
        )

    def test_unknown_plug_syntax(self):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "plugs": {"fuse-support": 42}}, revision=1
            )

        assert str(raised.value) == "unknown syntax for plug 'fuse-support': 42"

    def test_non_string_interface(self):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "slots": {"fuse": {"interface": 1}}}, revision=1
            )

        assert str(raised.value) == "interface name on slot 'fuse' is not a string"

    def test_app_plugs_not_a_list(self):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "apps": {"one": {"plugs": "fuse-support"}}},
                revision=1,
            )

        assert str(raised.value) == "'plugs' of app 'one' in snap.yaml must be a list"

    @pytest.mark.parametrize("app_data", ["bin/alpha", ["fuse-support"], 42])
    def test_app_not_a_dict(self, app_data):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "apps": {"alpha-app": app_data}}, revision=1
            )

        assert str(raised.value) == (
            "app 'alpha-app' in snap.yaml must be a dictionary"
        )

    @pytest.mark.parametrize(
        "key,listed", [("plugs", {"fuse-support": None}), ("slots", ["fuse"])]
    )
    def test_app_lists_non_name(self, key, listed):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_data(
                {"name": "alpha", "apps": {"alpha-app": {key: [listed]}}},
                revision=1,
            )

        assert str(raised.value) == (
            f"'{key}' of app 'alpha-app' in snap.yaml must only list names, "
            f"found {listed!r}"
        )

    def test_app_without_data(self):
        snap_info = SnapInfo.from_yaml_data(
            {
                "name": "alpha",
                "apps": {"alpha-app": None},
                "plugs": {"fuse-support": None},
            },
            revision=1,
        )

        assert snap_info.plugs["fuse-support"].apps == frozenset({"alpha-app"})


class TestFromYamlFile:
    """Loading snap.yaml files."""

    def test_from_yaml_file(self, new_dir):
        snap_yaml = new_dir / "snap.yaml"
        snap_yaml.write_text(
            dedent(
                """\
                name: alpha
                version: "1.0"
                apps:
                  alpha-app:
                    command: bin/alpha
                    plugs: [fuse-support]
                """
            )
        )

        snap_info = SnapInfo.from_yaml_file(snap_yaml, revision="12")

        assert snap_info.plugs["fuse-support"].security_tags() == [
            "snap.alpha.alpha-app"
        ]

    def test_missing_file(self, new_dir):
        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_file(new_dir / "snap.yaml", revision="1")

        assert str(raised.value).startswith("Cannot read")

    def test_invalid_yaml(self, new_dir):
        snap_yaml = new_dir / "snap.yaml"
        snap_yaml.write_text("name: [alpha\n")

        with pytest.raises(errors.SnapInfoError) as raised:
            SnapInfo.from_yaml_file(snap_yaml, revision="1")

        assert str(raised.value).startswith("Cannot parse")


class TestImplicitSlots:
    """Slots provided by the platform snap."""

    def test_core_on_classic(self, core):
        slot = core.slots["fuse-support"]

        assert slot.interface == "fuse-support"
        assert slot.ref == "core:fuse-support"

    def test_core_on_core(self, fuse_support, core_release_info):
        core = SnapInfo(
            identity=SnapIdentity(name="core", revision="1", type=SnapType.OS)
        )
        core.add_implicit_slots([fuse_support], core_release_info)

        assert "fuse-support" in core.slots

    def test_trusty(self):
        trusty = ReleaseInfo(id="ubuntu", version_id="14.04")
        core = SnapInfo(
            identity=SnapIdentity(name="core", revision="1", type=SnapType.OS)
        )
        core.add_implicit_slots([FuseSupportInterface(release_info=trusty)], trusty)

        assert core.slots == {}

    def test_snapd_snap(self, fuse_support, release_info):
        snapd = SnapInfo(
            identity=SnapIdentity(name="snapd", revision="1", type=SnapType.SNAPD)
        )
        snapd.add_implicit_slots([fuse_support], release_info)

        assert "fuse-support" in snapd.slots

    def test_app_snap(self, alpha, fuse_support, release_info):
        alpha.add_implicit_slots([fuse_support], release_info)

        assert alpha.slots == {}

    def test_declared_slot_untouched(self, fuse_support, release_info):
        core = SnapInfo.from_yaml_data(
            {
                "name": "core",
                "type": "os",
                "slots": {"fuse-support": {"custom": "attr"}},
            },
            revision=1,
        )
        core.add_implicit_slots([fuse_support], release_info)

        assert core.slots["fuse-support"].attrs == {"custom": "attr"}
