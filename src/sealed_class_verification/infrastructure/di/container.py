from typing import Any, Optional

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.rules.designed_for_inheritance import DesignedForInheritanceRule
from sealed_class_verification.domain.rules.marker_resolver import MarkerResolver
from sealed_class_verification.infrastructure.config_file_loader import ConfigFileLoader
from sealed_class_verification.infrastructure.gateways.astroid_gateway import AstroidGateway
from sealed_class_verification.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from sealed_class_verification.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway


class SealedClassContainer:
    """Dependency Injection Container for the designed-for-inheritance rule."""

    _instance: Optional["SealedClassContainer"] = None

    def __init__(self, config_loader: Optional[ConfigurationLoader] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_loader)

    def _register_defaults(self, config_loader: Optional[ConfigurationLoader]) -> None:
        """Register default implementations for protocols."""
        if config_loader is None:
            config_dict, tool_section = ConfigFileLoader.load_config_from_fs()
            config_loader = ConfigurationLoader(config_dict, tool_section)
        self.register_singleton("ConfigurationLoader", config_loader)

        astroid_gateway = AstroidGateway()
        self.register_singleton("AstroidGateway", astroid_gateway)
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("LibCSTFixerGateway", LibCSTFixerGateway())
        self.register_singleton("MarkerResolver", MarkerResolver(type_resolver=astroid_gateway))
        self.register_singleton(
            "DesignedForInheritanceRule",
            DesignedForInheritanceRule(self.get("MarkerResolver"), config_loader),
        )

    @classmethod
    def get_instance(cls) -> "SealedClassContainer":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    def register_singleton(self, key: str, instance: Any) -> None:
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        if key not in self._singletons:
            raise KeyError(f"No dependency registered for {key!r}")
        return self._singletons[key]

    def get_config_loader(self) -> ConfigurationLoader:
        return self.get("ConfigurationLoader")

    def get_astroid_gateway(self) -> AstroidGateway:
        return self.get("AstroidGateway")

    def get_filesystem_gateway(self) -> FileSystemGateway:
        return self.get("FileSystemGateway")

    def get_fixer_gateway(self) -> LibCSTFixerGateway:
        return self.get("LibCSTFixerGateway")

    def get_rule(self) -> DesignedForInheritanceRule:
        return self.get("DesignedForInheritanceRule")
