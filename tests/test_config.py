"""Tests for configuration loading and merging."""

import json

import pytest

from dtgen.codegen.core.config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    OutputMode,
    load_config,
)


def test_defaults():
    config = load_config()

    assert config.procedure_prefix == ""
    assert config.access_suffix == "Data"
    assert config.transfer_suffix == ""
    assert config.output_mode is OutputMode.MULTI_FILE
    assert config.grant_principal is None
    assert config.language == "csharp"


def test_output_mode_from_string():
    assert GeneratorConfig(output_mode="single-file").single_file


def test_invalid_output_mode():
    with pytest.raises(ConfigError):
        GeneratorConfig(output_mode="zip")


def test_file_then_overrides(tmp_path):
    path = tmp_path / "dtgen.json"
    path.write_text(
        json.dumps(
            {
                "procedure_prefix": "usp_",
                "access_suffix": "Repository",
                "target_framework": "net8.0",
            }
        )
    )

    config = load_config(
        custom_config={"access_suffix": "Gateway", "grant_principal": None},
        config_file=path,
    )

    assert config.procedure_prefix == "usp_"
    assert config.access_suffix == "Gateway"
    assert config.grant_principal is None
    assert config.custom == {"target_framework": "net8.0"}


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(config_file=tmp_path / "absent.json")


def test_config_file_must_hold_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_config(config_file=path)


def test_unknown_file_keys_land_in_custom(tmp_path):
    path = tmp_path / "dtgen.json"
    path.write_text(
        json.dumps(
            {
                "procedure_prefix": "usp_",
                "output_mode": "single-file",
                "target_framework": "net8.0",
            }
        )
    )

    assert ConfigManager().get_config(config_file=path) == GeneratorConfig(
        procedure_prefix="usp_",
        output_mode=OutputMode.SINGLE_FILE,
        custom={"target_framework": "net8.0"},
    )


def test_validate_config_warnings():
    manager = ConfigManager()
    warnings = manager.validate_config(
        GeneratorConfig(access_suffix="Data", transfer_suffix="Data", namespace="1bad")
    )

    assert any("identical" in warning for warning in warnings)
    assert any("namespace" in warning for warning in warnings)
    assert manager.validate_config(GeneratorConfig()) == []


def test_full_config_is_valid():
    config = load_config(
        custom_config={
            "procedure_prefix": "usp_",
            "access_suffix": "Repository",
            "transfer_suffix": "Dto",
            "output_mode": "single-file",
            "grant_principal": "WebUser",
            "namespace": "Northwind.Data",
        }
    )

    assert config.single_file
    assert config.has_grant
    assert ConfigManager().validate_config(config) == []
