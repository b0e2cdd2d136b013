"""Configuration for the inheritance rule and its fixers."""

import logging
from typing import Optional

from sealed_class_verification.domain.constants import (
    DEFAULT_FINAL_MODULE,
    FINAL_MODULES,
    VALUE_TYPE_BASES,
)

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    """
    Holds the [tool.sealed-class-verification] section of pyproject.toml.

    Reading the file is infrastructure work (ConfigFileLoader); this class only
    validates and exposes the values, so tests can build it from a plain dict.
    """

    def __init__(
        self,
        config: Optional[dict[str, object]] = None,
        tool_section: Optional[dict[str, object]] = None,
    ) -> None:
        self._config: dict[str, object] = dict(config or {})
        self._tool_section: dict[str, object] = dict(tool_section or {})
        if self._config:
            self.validate_config(self._config)

    def validate_config(self, config: dict[str, object]) -> None:
        """Log a warning for every value that will be ignored."""
        final_module = config.get("final_module")
        if final_module is not None and final_module not in FINAL_MODULES:
            logger.warning(
                "Configuration Warning: 'final_module' must be one of %s, got %r. Using %r.",
                sorted(FINAL_MODULES), final_module, DEFAULT_FINAL_MODULE,
            )
        for key in ("exclude", "extra_value_type_bases"):
            raw = config.get(key)
            if raw is not None and not isinstance(raw, list):
                logger.warning("Configuration Warning: %r must be a list of strings.", key)

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def tool_section(self) -> dict[str, object]:
        return self._tool_section

    @property
    def final_module(self) -> str:
        """Module that @final is imported from when a class is sealed."""
        value = self._config.get("final_module", DEFAULT_FINAL_MODULE)
        if isinstance(value, str) and value in FINAL_MODULES:
            return value
        return DEFAULT_FINAL_MODULE

    def _get_list(self, key: str) -> list[str]:
        """Helper to safely get a list of strings from config."""
        raw = self._config.get(key, [])
        if not isinstance(raw, list):
            return []
        return [item for item in raw if isinstance(item, str)]

    @property
    def exclude(self) -> list[str]:
        """Glob patterns for files the command line skips."""
        return self._get_list("exclude")

    @property
    def value_type_bases(self) -> frozenset[str]:
        """Base class names that make a class a value type (never classified)."""
        return VALUE_TYPE_BASES.union(self._get_list("extra_value_type_bases"))
