import logging
from pathlib import Path
from typing import Optional

import astroid  # type: ignore[import-untyped]
from astroid import modutils

from sealed_class_verification.domain.entities import AttributeReference, Namespace, ResolvedType
from sealed_class_verification.domain.protocols import AstroidProtocol

logger = logging.getLogger(__name__)


class AstroidGateway(AstroidProtocol):
    """AST intelligence gateway: parsing and true inference through astroid."""

    def clear_inference_cache(self) -> None:
        """Clear the astroid inference cache to force fresh inference after code changes."""
        astroid.MANAGER.clear_cache()

    @staticmethod
    def module_name_for(file_path: str) -> str:
        """Dotted module name of a file, falling back to its stem outside sys.path."""
        try:
            return ".".join(modutils.modpath_from_file(file_path))
        except ImportError:
            return Path(file_path).stem

    def parse_source(self, source: str, module_name: str = "", file_path: Optional[str] = None) -> astroid.nodes.Module:
        return astroid.parse(source, module_name=module_name, path=file_path)

    def parse_file(self, file_path: str) -> Optional[astroid.nodes.Module]:
        """Parse a file and return the astroid Module node, None if it cannot be read or parsed."""
        try:
            source = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read %s: %s", file_path, exc)
            return None
        try:
            return self.parse_source(source, self.module_name_for(file_path), file_path)
        except astroid.AstroidSyntaxError as exc:
            logger.warning("Cannot parse %s: %s", file_path, exc)
            return None

    @staticmethod
    def namespace_of(declaration: astroid.nodes.NodeNG) -> Namespace:
        """
        Enclosing-namespace chain of a declaration: the segments of its defining
        module. Enclosing classes and functions are not namespaces.
        """
        current = declaration.parent
        while current is not None and not isinstance(current, astroid.nodes.Module):
            current = current.parent
        module_name = current.name if current is not None else ""
        return Namespace.from_dotted(module_name)

    def resolve_type(self, reference: AttributeReference) -> Optional[ResolvedType]:
        """Infer the class or function a decorator refers to; None when inference fails."""
        node = reference.node
        if node is None:
            return None
        if isinstance(node, astroid.nodes.Call):
            node = node.func
        try:
            inferred = list(node.infer())
        except (astroid.AstroidError, AttributeError) as exc:
            logger.debug("Inference failed for %r: %s", reference.name, exc)
            return None

        for value in inferred:
            if value is astroid.Uninferable:
                continue
            if isinstance(value, (astroid.nodes.ClassDef, astroid.nodes.FunctionDef)):
                return ResolvedType(name=value.name, containing_namespace=self.namespace_of(value))
        return None
