"""Authoritative detection of the DesignedForInheritance marker on a class."""

import logging
from typing import Optional

import astroid  # type: ignore[import-untyped]

from sealed_class_verification.domain.constants import DESIGNED_FOR_INHERITANCE
from sealed_class_verification.domain.entities import (
    AttributeReference,
    MarkerIdentity,
    Namespace,
    ResolvedType,
)
from sealed_class_verification.domain.protocols import TypeResolverProtocol

logger = logging.getLogger(__name__)


def written_name(node: astroid.nodes.NodeNG) -> str:
    """Dotted name of a decorator expression as written (calls use their callee)."""
    if isinstance(node, astroid.nodes.Call):
        return written_name(node.func)
    if isinstance(node, astroid.nodes.Name):
        return node.name
    if isinstance(node, astroid.nodes.Attribute):
        return f"{written_name(node.expr)}.{node.attrname}"
    return node.as_string()


def attribute_references(class_node: astroid.nodes.ClassDef) -> list[AttributeReference]:
    """Decorators attached to a class, in source order."""
    decorators = getattr(class_node, "decorators", None)
    if decorators is None:
        return []
    return [
        AttributeReference(
            name=written_name(decorator),
            node=decorator,
            lineno=decorator.lineno,
            col_offset=decorator.col_offset,
        )
        for decorator in decorators.nodes
    ]


def namespace_path(namespace: Optional[Namespace]) -> str:
    """Join an enclosing-namespace chain into declaration order, skipping empty segments."""
    segments: list[str] = []
    while namespace is not None:
        if namespace.name and namespace.name.strip():
            segments.append(namespace.name)
        namespace = namespace.containing_namespace
    segments.reverse()
    return ".".join(segments)


class MarkerResolver:
    """
    Decides whether a class carries the genuine marker.

    A decorator whose last name segment matches the marker is only a candidate:
    an unrelated decorator may share the name. Candidates are confirmed through
    the injected type resolver, which is the expensive step, so it only runs
    when the cheap name filter leaves something to confirm.
    """

    def __init__(
        self,
        type_resolver: TypeResolverProtocol,
        marker: MarkerIdentity = DESIGNED_FOR_INHERITANCE,
    ) -> None:
        self._type_resolver = type_resolver
        self._marker = marker

    @property
    def marker(self) -> MarkerIdentity:
        return self._marker

    def candidates(self, class_node: astroid.nodes.ClassDef) -> list[AttributeReference]:
        """Decorators whose written name may denote the marker."""
        accepted = self._marker.accepted_names
        return [ref for ref in attribute_references(class_node) if ref.last_segment in accepted]

    def is_confirmed(self, reference: AttributeReference) -> bool:
        """True if the reference resolves to a declaration in the marker's namespace."""
        resolved: Optional[ResolvedType] = self._type_resolver.resolve_type(reference)
        if resolved is None:
            logger.debug("Could not resolve decorator %r; not treated as the marker", reference.name)
            return False
        return namespace_path(resolved.containing_namespace) == self._marker.namespace

    def is_marked(self, class_node: astroid.nodes.ClassDef) -> bool:
        if class_node is None:
            raise TypeError("class_node must not be None")
        candidates = self.candidates(class_node)
        if not candidates:
            return False
        return any(self.is_confirmed(candidate) for candidate in candidates)
