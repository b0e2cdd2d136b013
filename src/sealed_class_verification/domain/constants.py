"""
Rule identity, marker identity and the fixed diagnostic message templates.
"""

from sealed_class_verification.domain.entities import ClassificationKind, MarkerIdentity

RULE_ID: str = "DesignedForInheritance"

DESIGNED_FOR_INHERITANCE: MarkerIdentity = MarkerIdentity(
    short_name="DesignedForInheritance",
    namespace="ProductiveRage.SealedClassVerification",
)

MESSAGES: dict[ClassificationKind, str] = {
    ClassificationKind.MISSING_MARKER: (
        "Class '%s' must be abstract, sealed with @final or static, "
        "or be decorated with @DesignedForInheritance"
    ),
    ClassificationKind.MARKER_ON_CLOSED_CLASS: (
        "Class '%s' is abstract, sealed with @final or static "
        "and must not be decorated with @DesignedForInheritance"
    ),
}

# pylint needs a distinct msgid/symbol per template.
PYLINT_MESSAGE_IDS: dict[ClassificationKind, tuple[str, str]] = {
    ClassificationKind.MISSING_MARKER: ("W9701", "missing-designed-for-inheritance"),
    ClassificationKind.MARKER_ON_CLOSED_CLASS: ("W9702", "designed-for-inheritance-on-closed-class"),
}

FINAL_DECORATOR: str = "final"
DEFAULT_FINAL_MODULE: str = "typing"
FINAL_MODULES: frozenset[str] = frozenset({"typing", "typing_extensions"})

ABSTRACT_BASES: frozenset[str] = frozenset({"ABC", "Protocol"})
ABSTRACT_METACLASSES: frozenset[str] = frozenset({"ABCMeta"})

VALUE_TYPE_BASES: frozenset[str] = frozenset(
    {
        "NamedTuple",
        "TypedDict",
        "Enum",
        "IntEnum",
        "StrEnum",
        "Flag",
        "IntFlag",
    }
)

OVERRIDABLE_DECORATORS: frozenset[str] = frozenset({"abstractmethod", "abstractproperty"})

CONFIG_SECTION: str = "sealed-class-verification"
