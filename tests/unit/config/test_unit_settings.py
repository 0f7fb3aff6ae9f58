# tests/unit/config/test_unit_settings.py - v1
"""Tests for config/settings.py - defaults, env loading and validation."""

from __future__ import annotations

import pytest

from irrgraph.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_detection_defaults(self):
        s = Settings(_env_file=None)
        assert s.community_algorithm == "leiden"
        assert s.community_resolution == 1.0
        assert s.community_weight == "ncweight"
        assert s.community_metric == "average"
        assert s.community_chains_list == ["CDR3b"]
        assert s.community_seed is None
        assert s.leiden_iterations == 100

    def test_logging_defaults(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "json"
        assert s.log_file is None


class TestSettingsLoading:
    def test_chain_list_parsing(self):
        s = Settings(_env_file=None, community_chains=" CDR3a , CDR3b ")
        assert s.community_chains_list == ["CDR3a", "CDR3b"]

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("IRRGRAPH_COMMUNITY_METRIC", "strict")
        monkeypatch.setenv("IRRGRAPH_COMMUNITY_SEED", "11")
        s = Settings(_env_file=None)
        assert s.community_metric == "strict"
        assert s.community_seed == 11

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("IRRGRAPH_COMMUNITY_ALGORITHM=louvain\n", encoding="utf-8")
        s = Settings(_env_file=str(env))
        assert s.community_algorithm == "louvain"

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, community_resolution=2.5)
        assert s.community_resolution == 2.5


class TestSettingsValidation:
    def test_zero_resolution(self):
        with pytest.raises(ConfigurationError, match="resolution"):
            Settings(_env_file=None, community_resolution=0)

    def test_unknown_chain(self):
        with pytest.raises(ConfigurationError, match="chains"):
            Settings(_env_file=None, community_chains="CDR3a,TRB")

    def test_too_many_chains(self):
        with pytest.raises(ConfigurationError, match="chains"):
            Settings(_env_file=None, community_chains="CDR3a,CDR3b,CDR3g")

    def test_zero_iterations(self):
        with pytest.raises(ConfigurationError, match="n_iterations"):
            Settings(_env_file=None, leiden_iterations=0)

    def test_unknown_metric_is_type_error(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, community_metric="median")

    def test_bad_rotation(self):
        with pytest.raises(ValueError, match="size"):
            Settings(_env_file=None, log_rotation="ten megabytes")

    def test_negative_retention(self):
        with pytest.raises(ValueError, match="log_retention"):
            Settings(_env_file=None, log_retention=-1)
