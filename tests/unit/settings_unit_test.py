import pytest
from pydantic import ValidationError

from dhconfig.config.defaults import DEFAULT_CONFIG
from dhconfig.config.settings import LoaderSettings, _deep_merge, load_settings


def test_defaults_loaded():
    settings = load_settings(environ={})
    assert isinstance(settings, LoaderSettings)
    assert settings.delimiter == DEFAULT_CONFIG["DELIMITER"]
    assert settings.environment_variable == "NODE_ENV"
    assert settings.file_extension == ".json"
    assert settings.priorities.argv > settings.priorities.env > settings.priorities.file > settings.priorities.overrides


def test_environment_variables_override_defaults():
    settings = load_settings(environ={"DHCONFIG_DELIMITER": "/", "DHCONFIG_PARSE_ARGV_VALUES": "false"})
    assert settings.delimiter == "/"
    assert settings.parse_argv_values is False


def test_explicit_overrides_win_over_environment():
    settings = load_settings({"delimiter": "->"}, environ={"DHCONFIG_DELIMITER": "/"})
    assert settings.delimiter == "->"


def test_nested_priority_override():
    settings = load_settings({"priorities": {"overrides": 500}}, environ={})
    assert settings.priorities.overrides == 500
    assert settings.priorities.argv == DEFAULT_CONFIG["PRIORITIES"]["ARGV"]


def test_extension_gets_a_dot():
    assert load_settings({"FILE_EXTENSION": "yml"}, environ={}).file_extension == ".yml"


def test_empty_delimiter_rejected():
    with pytest.raises(ValidationError):
        load_settings({"delimiter": ""}, environ={})


def test_settings_are_frozen():
    settings = load_settings(environ={})
    with pytest.raises(ValidationError):
        settings.delimiter = ":"


def test_dict_like_get():
    settings = load_settings(environ={})
    assert settings.get("delimiter") == "."
    assert settings.get("non_existing_key", 42) == 42


def test_deep_merge_override_wins():
    merged = _deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}, "d": {"e": 1}})
    assert merged == {"a": {"b": 3, "c": 2}, "d": {"e": 1}}
