"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_breakpoints,
    get_environment,
    get_environment_info,
    get_log_level,
    get_min_overall_score,
    get_primary_detection,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("SCAFFOLD_MIN_OVERALL_SCORE", raising=False)
        assert get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE) == 85

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SCAFFOLD_MIN_OVERALL_SCORE", "60")
        result = get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE, override=70)
        assert result == 70

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("SCAFFOLD_MIN_OVERALL_SCORE", "60")
        result = get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE)
        assert result == 60
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("SCAFFOLD_MIN_OVERALL_SCORE", "lots")
        assert get_environment(EnvVar.SCAFFOLD_MIN_OVERALL_SCORE) == 85

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("SCAFFOLD_LOG_LEVEL", "debug")
        result = get_environment(EnvVar.SCAFFOLD_LOG_LEVEL)
        assert result == "debug"


class TestGetEnvironmentInfo:
    """Tests for metadata access."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns the EnvConfig attached to the member."""
        info = get_environment_info(EnvVar.SCAFFOLD_PRIMARY_DETECTION)
        assert isinstance(info, EnvConfig)
        assert info.name == "SCAFFOLD_PRIMARY_DETECTION"
        assert info.default == "role"
        assert info.category == "layout"

    @pytest.mark.unit
    def test_description_present(self):
        """Every variable documents itself."""
        for var in EnvVar:
            assert var.value.description


class TestListEnvironmentVariables:
    """Tests for category filtering."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """No category returns every member."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Category filter narrows the list."""
        layout_vars = list_environment_variables("layout")
        assert EnvVar.SCAFFOLD_DEFAULT_BREAKPOINTS in layout_vars
        assert EnvVar.SCAFFOLD_LOG_LEVEL not in layout_vars


class TestConvenienceFunctions:
    """Tests for typed convenience accessors."""

    @pytest.mark.unit
    def test_log_level_upper_cased(self, monkeypatch):
        """Log level names are normalized."""
        monkeypatch.setenv("SCAFFOLD_LOG_LEVEL", "warning")
        assert get_log_level() == "WARNING"

    @pytest.mark.unit
    def test_min_overall_score_override(self):
        """Override beats default."""
        assert get_min_overall_score(override=50) == 50

    @pytest.mark.unit
    def test_primary_detection_default(self, monkeypatch):
        """Role detection is the default."""
        monkeypatch.delenv("SCAFFOLD_PRIMARY_DETECTION", raising=False)
        assert get_primary_detection() == "role"

    @pytest.mark.unit
    def test_primary_detection_unknown_falls_back(self, monkeypatch):
        """Unknown strategies fall back to role detection."""
        monkeypatch.setenv("SCAFFOLD_PRIMARY_DETECTION", "magic")
        assert get_primary_detection() == "role"

    @pytest.mark.unit
    def test_primary_detection_id(self, monkeypatch):
        """The id heuristic can be selected."""
        monkeypatch.setenv("SCAFFOLD_PRIMARY_DETECTION", " ID ")
        assert get_primary_detection() == "id"

    @pytest.mark.unit
    def test_default_breakpoints(self, monkeypatch):
        """Default breakpoints split on commas."""
        monkeypatch.delenv("SCAFFOLD_DEFAULT_BREAKPOINTS", raising=False)
        assert get_default_breakpoints() == ["320x640", "768x1024", "1280x800"]

    @pytest.mark.unit
    def test_breakpoints_from_env(self, monkeypatch):
        """Whitespace and empty entries are dropped."""
        monkeypatch.setenv("SCAFFOLD_DEFAULT_BREAKPOINTS", "375x667, ,1024x768")
        assert get_default_breakpoints() == ["375x667", "1024x768"]

    @pytest.mark.unit
    def test_breakpoints_list_override(self):
        """A list override is returned as a copy."""
        override = ["400x800"]
        result = get_default_breakpoints(override=override)
        assert result == ["400x800"]
        assert result is not override

    @pytest.mark.unit
    def test_breakpoints_string_override(self):
        """A string override is split like the environment value."""
        assert get_default_breakpoints(override="400x800,1440x900") == ["400x800", "1440x900"]

    @pytest.mark.unit
    def test_blank_breakpoints_use_default(self, monkeypatch):
        """A blank variable falls back to the default list."""
        monkeypatch.setenv("SCAFFOLD_DEFAULT_BREAKPOINTS", " , ")
        assert get_default_breakpoints() == ["320x640", "768x1024", "1280x800"]
