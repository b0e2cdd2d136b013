from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Modifier(Enum):
    """Structural qualifiers that settle whether or how a class may be extended."""
    ABSTRACT = "abstract"
    SEALED = "sealed"
    STATIC = "static"


class ClassificationKind(Enum):
    """Outcome of classifying one class declaration."""
    PASS = "pass"
    MISSING_MARKER = "missing_marker"
    MARKER_ON_CLOSED_CLASS = "marker_on_closed_class"


class FixKind(Enum):
    """The two corrective transformations available for a missing marker."""
    SEAL = "seal"
    ADD_MARKER = "add_marker"


class TransformationType(Enum):
    """Types of code transformations the fixer can apply."""
    SEAL_CLASS = "seal_class"
    ADD_MARKER = "add_marker"


@dataclass(frozen=True)
class SourceLocation:
    """Line (1-based) and column (0-based) of a class name token."""
    lineno: int
    col_offset: int

    def __str__(self) -> str:
        return f"{self.lineno}:{self.col_offset}"


@dataclass(frozen=True)
class MarkerIdentity:
    """Fully-qualified identity of the decorator that opens a class for inheritance."""
    short_name: str
    namespace: str
    suffix: str = "Attribute"

    @property
    def accepted_names(self) -> frozenset[str]:
        """Short names that may refer to the marker, with and without the suffix."""
        return frozenset({self.short_name, self.short_name + self.suffix})


@dataclass(frozen=True)
class AttributeReference:
    """A decorator usage attached to a class, as written in the source."""
    name: str
    node: Any = field(compare=False, repr=False)
    lineno: Optional[int] = None
    col_offset: Optional[int] = None

    @property
    def last_segment(self) -> str:
        return self.name.split(".")[-1]


@dataclass(frozen=True)
class Namespace:
    """
    One segment of an enclosing-namespace chain.

    The outermost (global) namespace has an empty name and no container.
    """
    name: str
    containing_namespace: Optional["Namespace"] = None

    @classmethod
    def from_dotted(cls, dotted: str) -> "Namespace":
        """Build the chain for a dotted path, innermost segment returned."""
        namespace = cls("")
        for segment in dotted.split("."):
            if segment:
                namespace = cls(segment, namespace)
        return namespace


@dataclass(frozen=True)
class ResolvedType:
    """The authoritative declaration a decorator reference resolved to."""
    name: str
    containing_namespace: Optional[Namespace] = None


@dataclass(frozen=True)
class ClassificationResult:
    """
    Classification of a single class declaration.

    class_path is the dotted chain of enclosing class/function names ending with
    the class itself; fixers use it to find the class again in a concrete tree.
    """
    kind: ClassificationKind
    class_name: str
    class_path: str
    location: SourceLocation
    node: Any = field(default=None, compare=False, repr=False)

    @property
    def is_violation(self) -> bool:
        return self.kind is not ClassificationKind.PASS


@dataclass(frozen=True)
class TransformationPlan:
    """
    Pure data structure describing a code transformation.

    Rules return plans instead of LibCST transformers; the fixer gateway
    interprets the plan and applies the actual LibCST transformation.
    """
    transformation_type: TransformationType
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def seal_class(cls, class_path: str, final_module: str = "typing") -> "TransformationPlan":
        """Create plan to decorate a class with @final."""
        return cls(
            transformation_type=TransformationType.SEAL_CLASS,
            params={"class_path": class_path, "final_module": final_module}
        )

    @classmethod
    def add_marker(cls, class_path: str, marker: MarkerIdentity) -> "TransformationPlan":
        """Create plan to decorate a class with the inheritance marker and import it."""
        return cls(
            transformation_type=TransformationType.ADD_MARKER,
            params={
                "class_path": class_path,
                "marker_name": marker.short_name,
                "marker_namespace": marker.namespace,
            }
        )


@dataclass(frozen=True)
class FileDiagnostic:
    """A violation found in a file, ready for reporting."""
    file_path: str
    result: ClassificationResult
    message: str
    fixable: bool
    instructions: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporter."""
        return {
            "file": self.file_path,
            "line": self.result.location.lineno,
            "column": self.result.location.col_offset,
            "class": self.result.class_name,
            "kind": self.result.kind.value,
            "message": self.message,
            "fixable": self.fixable,
        }


@dataclass(frozen=True)
class AuditResult:
    """Result of checking a set of files."""
    diagnostics: list[FileDiagnostic] = field(default_factory=list)
    files_checked: int = 0
    unparseable_files: list[str] = field(default_factory=list)

    def has_violations(self) -> bool:
        return bool(self.diagnostics)


@dataclass(frozen=True)
class FixResult:
    """Outcome of a fix run across a set of files."""
    files_modified: list[str] = field(default_factory=list)
    classes_fixed: int = 0
    unfixable: list[FileDiagnostic] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)
    diffs: dict[str, str] = field(default_factory=dict)
