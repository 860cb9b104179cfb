"""Tests for relations.py - Reference descriptors and edges."""

import pytest

from slnmove.graph import ProjectIdentity
from slnmove.graph.relations import ReferenceDescriptor, ReferenceEdge, ReferenceKind
from tests.core.graph_test_helpers import TOKEN, project_ref, strong_ref


class TestReferenceKind:
    """Tests for ReferenceKind enum."""

    def test_all_reference_kinds_exist(self):
        expected = {"STRONG_NAME": "strong-name", "PATH": "path"}
        for name, value in expected.items():
            assert getattr(ReferenceKind, name).value == value


class TestStrongName:
    """Tests for strong-name descriptors."""

    def test_render_uses_neutral_for_empty_culture(self):
        ref = strong_ref("Core.Lib")
        assert str(ref) == (
            f"Core.Lib, Version=1.0.0.0, Culture=neutral, PublicKeyToken={TOKEN}"
        )

    def test_render_keeps_explicit_culture(self):
        ref = ReferenceDescriptor.strong_name("Res", "2.0.0.0", TOKEN, culture="de-DE")
        assert "Culture=de-DE" in str(ref)

    def test_parse(self):
        ref = ReferenceDescriptor.parse_strong_name(
            f"Core.Lib, Version=1.2.3.4, Culture=neutral, PublicKeyToken={TOKEN}"
        )
        assert ref.kind == ReferenceKind.STRONG_NAME
        assert ref.name == "Core.Lib"
        assert ref.version == "1.2.3.4"
        assert ref.culture == ""
        assert ref.effective_culture == "neutral"
        assert ref.public_key_token == TOKEN

    def test_parse_is_case_insensitive_on_keys(self):
        ref = ReferenceDescriptor.parse_strong_name(
            f"X, version=1.0.0.0, culture=fr, publickeytoken={TOKEN}"
        )
        assert ref.version == "1.0.0.0"
        assert ref.culture == "fr"

    @pytest.mark.parametrize(
        "text",
        [
            "System.Data",
            "Foo, Version=1.0.0.0, Culture=neutral, PublicKeyToken=null",
            "Foo, Version=1.0.0.0",
        ],
    )
    def test_parse_rejects_weak_names(self, text):
        with pytest.raises(ValueError):
            ReferenceDescriptor.parse_strong_name(text)

    def test_simple_name_is_assembly_name(self):
        assert strong_ref("Core.Lib").simple_name == "Core.Lib"


class TestPathReference:
    """Tests for path descriptors."""

    def test_name_defaults_to_stem(self):
        ref = ReferenceDescriptor.from_path("..\\Lib\\Lib.csproj")
        assert ref.name == "Lib"
        assert ref.simple_name == "Lib"
        assert str(ref) == "..\\Lib\\Lib.csproj"

    def test_forward_slashes(self):
        assert ReferenceDescriptor.from_path("../My.Lib/My.Lib.csproj").simple_name == "My.Lib"

    def test_matches_declared_name_and_path_stem(self):
        ref = ReferenceDescriptor.from_path("bin\\Legacy.dll", name="LegacyAlias")
        assert ref.matches("LegacyAlias")
        assert ref.matches("Legacy")
        assert not ref.matches("Other")
        assert ref.match_keys == frozenset({"LegacyAlias", "Legacy"})

    def test_matches_identity_object(self):
        assert project_ref("L").matches(ProjectIdentity("L"))


class TestReferenceEdge:
    """Tests for ReferenceEdge equality."""

    def test_equal_by_holder_and_referenced_identity(self):
        a = ProjectIdentity("A")
        by_path = ReferenceEdge(a, project_ref("L"))
        by_strong_name = ReferenceEdge(a, strong_ref("L"))
        assert by_path == by_strong_name
        assert hash(by_path) == hash(by_strong_name)

    def test_different_holders_differ(self):
        assert ReferenceEdge(ProjectIdentity("A"), project_ref("L")) != ReferenceEdge(
            ProjectIdentity("B"), project_ref("L")
        )

    def test_str(self):
        edge = ReferenceEdge(ProjectIdentity("A"), project_ref("L"))
        assert str(edge) == "A --> L (path)"
