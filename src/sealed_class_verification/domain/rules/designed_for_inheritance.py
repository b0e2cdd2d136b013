"""Designed-for-inheritance rule - classification and fix selection."""

from typing import Optional

import astroid  # type: ignore[import-untyped]

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.constants import (
    ABSTRACT_BASES,
    ABSTRACT_METACLASSES,
    FINAL_DECORATOR,
    MESSAGES,
    OVERRIDABLE_DECORATORS,
    RULE_ID,
)
from sealed_class_verification.domain.entities import (
    ClassificationKind,
    ClassificationResult,
    FixKind,
    Modifier,
    SourceLocation,
    TransformationPlan,
)
from sealed_class_verification.domain.rules import Violation
from sealed_class_verification.domain.rules.marker_resolver import MarkerResolver, written_name


def _last_segment(node: astroid.nodes.NodeNG) -> str:
    """Short name of a base/decorator expression; subscripted generics use their origin."""
    if isinstance(node, astroid.nodes.Subscript):
        node = node.value
    return written_name(node).split(".")[-1]


def class_path(node: astroid.nodes.ClassDef) -> str:
    """Dotted chain of enclosing class/function names, ending with the class."""
    names: list[str] = []
    current: Optional[astroid.nodes.NodeNG] = node
    while current is not None and not isinstance(current, astroid.nodes.Module):
        if isinstance(current, (astroid.nodes.ClassDef, astroid.nodes.FunctionDef)):
            names.append(current.name)
        current = current.parent
    names.reverse()
    return ".".join(names)


def name_location(node: astroid.nodes.ClassDef) -> SourceLocation:
    """Location of the class name token."""
    position = getattr(node, "position", None)
    if position is not None and position.end_lineno is not None:
        return SourceLocation(position.end_lineno, position.end_col_offset - len(node.name))
    return SourceLocation(node.lineno, node.col_offset)


class DesignedForInheritanceRule:
    """
    Every class must be closed (abstract, @final or static) or explicitly opened
    with @DesignedForInheritance, never both.

    Closing modifiers are checked syntactically; the marker goes through
    MarkerResolver, which only consults semantic resolution for decorators that
    look like the marker.
    """

    code: str = RULE_ID
    description: str = (
        "Designed For Inheritance: classes must be abstract, sealed with @final or static, "
        "or be decorated with @DesignedForInheritance. "
        "Auto-fix: adds @final, or @DesignedForInheritance when the class has overridable members."
    )
    fix_type: str = "code"

    def __init__(
        self,
        marker_resolver: MarkerResolver,
        config_loader: Optional[ConfigurationLoader] = None,
    ) -> None:
        self.marker_resolver = marker_resolver
        self.config_loader = config_loader or ConfigurationLoader()

    def is_value_type(self, node: astroid.nodes.ClassDef) -> bool:
        value_type_bases = self.config_loader.value_type_bases
        return any(_last_segment(base) in value_type_bases for base in node.bases)

    def applies_to(self, node: astroid.nodes.NodeNG) -> bool:
        """Only class-shaped declarations are classified; value types never are."""
        return isinstance(node, astroid.nodes.ClassDef) and not self.is_value_type(node)

    def _is_static(self, node: astroid.nodes.ClassDef) -> bool:
        methods = [member for member in node.body if isinstance(member, astroid.nodes.FunctionDef)]
        if not methods:
            return False
        return all(
            method.decorators is not None
            and any(_last_segment(d) == "staticmethod" for d in method.decorators.nodes)
            for method in methods
        )

    @staticmethod
    def _has_abstract_metaclass(node: astroid.nodes.ClassDef) -> bool:
        # astroid keeps metaclass= out of ClassDef.keywords
        try:
            metaclass = node.declared_metaclass()
        except astroid.AstroidError:
            return False
        return metaclass is not None and getattr(metaclass, "name", None) in ABSTRACT_METACLASSES

    def closing_modifiers(self, node: astroid.nodes.ClassDef) -> frozenset[Modifier]:
        """Syntactic scan for the structural qualifiers that close a class."""
        modifiers: set[Modifier] = set()
        if node.decorators is not None and any(
            _last_segment(d) == FINAL_DECORATOR for d in node.decorators.nodes
        ):
            modifiers.add(Modifier.SEALED)
        if any(_last_segment(base) in ABSTRACT_BASES for base in node.bases):
            modifiers.add(Modifier.ABSTRACT)
        if self._has_abstract_metaclass(node):
            modifiers.add(Modifier.ABSTRACT)
        if self._is_static(node):
            modifiers.add(Modifier.STATIC)
        return frozenset(modifiers)

    def classify(self, node: astroid.nodes.ClassDef) -> ClassificationResult:
        if node is None:
            raise TypeError("node must not be None")
        if not self.applies_to(node):
            raise ValueError(f"{node!r} is not a class declaration this rule classifies")

        is_closed = bool(self.closing_modifiers(node))
        is_marked = self.marker_resolver.is_marked(node)
        if is_closed:
            kind = ClassificationKind.MARKER_ON_CLOSED_CLASS if is_marked else ClassificationKind.PASS
        else:
            kind = ClassificationKind.PASS if is_marked else ClassificationKind.MISSING_MARKER

        return ClassificationResult(
            kind=kind,
            class_name=node.name,
            class_path=class_path(node),
            location=name_location(node),
            node=node,
        )

    @staticmethod
    def _raises_not_implemented(method: astroid.nodes.FunctionDef) -> bool:
        for statement in method.body:
            if not isinstance(statement, astroid.nodes.Raise) or statement.exc is None:
                continue
            if _last_segment(statement.exc) == "NotImplementedError":
                return True
        return False

    def is_overridable(self, member: astroid.nodes.NodeNG) -> bool:
        """A method or property meant to be replaced by subclasses."""
        if not isinstance(member, astroid.nodes.FunctionDef):
            return False
        if member.decorators is not None and any(
            _last_segment(d) in OVERRIDABLE_DECORATORS for d in member.decorators.nodes
        ):
            return True
        return self._raises_not_implemented(member)

    def select_fix(self, node: astroid.nodes.ClassDef) -> FixKind:
        """
        Sealing a class with overridable members would defeat them, so those
        classes get the marker; everything else is sealed.
        """
        if any(self.is_overridable(member) for member in node.body):
            return FixKind.ADD_MARKER
        return FixKind.SEAL

    def plan_for(self, result: ClassificationResult) -> Optional[TransformationPlan]:
        """Transformation plan for a classification, None when no automatic fix exists."""
        if result.kind is not ClassificationKind.MISSING_MARKER:
            return None
        if self.select_fix(result.node) is FixKind.ADD_MARKER:
            return TransformationPlan.add_marker(result.class_path, self.marker_resolver.marker)
        return TransformationPlan.seal_class(result.class_path, self.config_loader.final_module)

    def message_for(self, result: ClassificationResult) -> str:
        return MESSAGES[result.kind] % result.class_name

    def check(self, node: astroid.nodes.NodeNG) -> list[Violation]:
        """Classify a class node; PASS and unclassified nodes yield nothing."""
        if not self.applies_to(node):
            return []
        result = self.classify(node)
        if not result.is_violation:
            return []
        fixable = result.kind is ClassificationKind.MISSING_MARKER
        return [
            Violation(
                code=self.code,
                message=self.message_for(result),
                location=str(result.location),
                node=node,
                result=result,
                fixable=fixable,
                fix_failure_reason=None if fixable else "Marker on a closed class needs a manual decision",
            )
        ]

    def fix(self, violation: Violation) -> Optional[TransformationPlan]:
        """Return the plan for a missing marker; the closed-class conflict has no auto-fix."""
        if violation.code != self.code:
            return None
        return self.plan_for(violation.result)

    def get_fix_instructions(self, violation: Violation) -> str:
        """Provide human instructions for manual fix."""
        if violation.result.kind is ClassificationKind.MARKER_ON_CLOSED_CLASS:
            return (
                f"Class '{violation.result.class_name}' is closed and marked at the same time: "
                "either remove @DesignedForInheritance, or remove @final / the ABC base / "
                "the static-only shape so the class is open for inheritance."
            )
        return (
            f"Decorate '{violation.result.class_name}' with @final (from typing import final), "
            "or, if it was designed to be subclassed, with @DesignedForInheritance "
            "(from ProductiveRage.SealedClassVerification import DesignedForInheritance)."
        )
