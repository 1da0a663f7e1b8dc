"""Tests for settings loading and quality-weight validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from evalhub.domain.exceptions import ConfigurationError
from evalhub.domain.rubric import DEFAULT_WEIGHTS, QualityWeights
from evalhub.infrastructure.config import Settings, get_settings


def test_defaults_from_environment():
    settings = Settings(_env_file=None)

    assert settings.openai_api_key.get_secret_value() == "sk-test-primary"
    assert settings.openai_model == "test-model"
    assert settings.tree_fetch_timeout_seconds == 10.0
    assert settings.api_keys() == [("primary", "sk-test-primary")]
    assert settings.weights() == DEFAULT_WEIGHTS


def test_backup_key_is_tried_second(monkeypatch):
    monkeypatch.setenv("OPENAI_BACKUP_API_KEY", "sk-test-backup")

    settings = Settings(_env_file=None)

    assert [label for label, _ in settings.api_keys()] == ["primary", "backup"]


def test_missing_primary_key_is_rejected(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_quality_weights_override_from_json(monkeypatch):
    monkeypatch.setenv("QUALITY_WEIGHTS", '{"readme_quality": 0.3, "code_organization": 0.1}')

    weights = Settings(_env_file=None).weights()

    assert weights.readme_quality == 0.3
    assert weights.code_organization == 0.1
    assert weights.maintenance == DEFAULT_WEIGHTS.maintenance


def test_quality_weights_must_sum_to_one(monkeypatch):
    monkeypatch.setenv("QUALITY_WEIGHTS", '{"readme_quality": 0.5}')

    with pytest.raises(ConfigurationError, match="sum to 1.0"):
        Settings(_env_file=None).weights()


def test_unknown_weight_name_is_rejected():
    with pytest.raises(ConfigurationError, match="stars"):
        QualityWeights.with_overrides({"stars": 0.1})


def test_negative_weight_is_rejected():
    with pytest.raises(ConfigurationError):
        QualityWeights(readme_quality=0.4, code_organization=-0.2, test_coverage=0.35)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
