"""Tests for ConfigurationLoader validation and defaults."""

import logging

import pytest

from sealed_class_verification.domain.config import ConfigurationLoader


class TestConfigurationLoader:
    def test_defaults(self) -> None:
        loader = ConfigurationLoader()

        assert loader.config == {}
        assert loader.final_module == "typing"
        assert loader.exclude == []
        assert "Enum" in loader.value_type_bases
        assert "NamedTuple" in loader.value_type_bases

    def test_values_from_section(self) -> None:
        loader = ConfigurationLoader(
            {
                "final_module": "typing_extensions",
                "exclude": ["*/migrations/*", 3],
                "extra_value_type_bases": ["BaseModel"],
            },
            {"other": {}},
        )

        assert loader.final_module == "typing_extensions"
        assert loader.exclude == ["*/migrations/*"]
        assert "BaseModel" in loader.value_type_bases
        assert "TypedDict" in loader.value_type_bases
        assert loader.tool_section == {"other": {}}

    def test_unknown_final_module_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            loader = ConfigurationLoader({"final_module": "mytyping"})

        assert loader.final_module == "typing"
        assert "final_module" in caplog.text

    def test_non_list_values_are_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            loader = ConfigurationLoader({"exclude": "*.py"})

        assert loader.exclude == []
        assert "'exclude' must be a list" in caplog.text
