import pytest

from translation_tracker.config import TrackerConfig, load_config
from translation_tracker.exceptions import ConfigError


def test_defaults_without_file(tmp_path):
    config = load_config(str(tmp_path / "missing.yaml"))

    assert config.unmodified_mt_threshold == 0.8
    assert config.unmodified_source_threshold == 0.6
    assert config.validation_delay == 15.0
    assert config.change_delay == 0.5
    assert "heading" in config.excluded_node_types
    assert config.alignment.step == 10


def test_file_values_and_overrides(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text(
        "source_language: en\n"
        "target_language: fr\n"
        "unmodified_mt_threshold: 0.9\n"
        "alignment:\n"
        "  max_steps: 5\n",
        encoding="utf-8",
    )

    config = load_config(str(path), target_language="ja", source_language=None)

    assert config.source_language == "en"
    assert config.target_language == "ja"
    assert config.unmodified_mt_threshold == 0.9
    assert config.alignment.max_steps == 5


def test_api_key_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACKER_TEST_KEY", "sk-test")
    path = tmp_path / "tracker.yaml"
    path.write_text('mt:\n  api_key: "${TRACKER_TEST_KEY}"\n', encoding="utf-8")

    assert load_config(str(path)).mt.api_key == "sk-test"


def test_invalid_yaml(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text("source_language: [en\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(str(path))


def test_non_mapping(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text("- en\n- es\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(str(path))


def test_out_of_range_threshold(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text("unmodified_mt_threshold: 1.5\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(str(path))


def test_model_defaults():
    config = TrackerConfig()
    assert config.mt.preferred_provider == "openai"
    assert config.min_source_tokens == 10
