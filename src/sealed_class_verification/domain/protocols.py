from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import astroid  # type: ignore[import-untyped]

    from sealed_class_verification.domain.entities import (
        AttributeReference,
        ResolvedType,
        TransformationPlan,
    )


class TypeResolverProtocol(Protocol):
    """Semantic resolution of a decorator reference to its declaration."""

    def resolve_type(self, reference: "AttributeReference") -> Optional["ResolvedType"]:
        """Return the declaration the reference denotes, or None when it cannot be resolved."""
        ...


class AstroidProtocol(TypeResolverProtocol, Protocol):
    def parse_file(self, file_path: str) -> Optional["astroid.nodes.Module"]:
        """Parse a file and return the astroid Module node."""
        ...

    def clear_inference_cache(self) -> None:
        """Clear the astroid inference cache to force fresh inference after code changes."""
        ...


class FixerGatewayProtocol(Protocol):
    """Protocol for applying code fixes. Implementers accept only TransformationPlan at boundary."""

    def apply_fixes(self, file_path: str, fixes: list["TransformationPlan"]) -> bool:
        """Apply a list of transformation plans to a file. Returns True if modified."""
        ...

    def apply_to_source(self, source: str, fixes: list["TransformationPlan"]) -> str:
        """Apply a list of transformation plans to source text and return the new text."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_python_files(self, path: str, exclude: Optional[list[str]] = None) -> list[str]:
        """Get all Python files in path (recursive if directory), minus excluded patterns."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def relative_path(self, path: str) -> str:
        """Return path relative to cwd when possible."""
        ...
