"""Tests for SLNMOVE_<SECTION>_<KEY> environment overrides."""

from __future__ import annotations


class TestTryParseEnvValue:
    """_try_parse_env_value turns strings into typed values."""

    def test_json_list_parsed(self):
        from slnmove.config import _try_parse_env_value

        result = _try_parse_env_value('[{"project": "Core"}]')
        assert result == [{"project": "Core"}]

    def test_boolean_parsed(self):
        from slnmove.config import _try_parse_env_value

        assert _try_parse_env_value("true") is True
        assert _try_parse_env_value("FALSE") is False

    def test_plain_string_passthrough(self):
        from slnmove.config import _try_parse_env_value

        assert _try_parse_env_value("Libs") == "Libs"

    def test_malformed_json_returns_string(self):
        from slnmove.config import _try_parse_env_value

        assert _try_parse_env_value("[Libs") == "[Libs"


class TestApplyEnvOverrides:
    """_apply_env_overrides maps variables onto config sections."""

    def test_key_with_underscore(self, monkeypatch):
        from slnmove.config import _apply_env_overrides

        monkeypatch.setenv("SLNMOVE_SOLUTION_READ_ONLY", "true")
        result = _apply_env_overrides({"solution": {"read_only": False}})
        assert result["solution"]["read_only"] is True

    def test_string_value(self, monkeypatch):
        from slnmove.config import _apply_env_overrides

        monkeypatch.setenv("SLNMOVE_RELOCATE_FOLDER", "Shared")
        result = _apply_env_overrides({"relocate": {"folder": "Libs"}})
        assert result["relocate"]["folder"] == "Shared"

    def test_creates_section(self, monkeypatch):
        from slnmove.config import _apply_env_overrides

        monkeypatch.setenv("SLNMOVE_OUTPUT_FORMAT", "json")
        assert _apply_env_overrides({})["output"]["format"] == "json"

    def test_variable_without_key_ignored(self, monkeypatch):
        from slnmove.config import _apply_env_overrides

        monkeypatch.setenv("SLNMOVE_VERBOSE", "1")
        assert "verbose" not in _apply_env_overrides({})
