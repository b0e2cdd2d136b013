"""Domain models for rules and violations."""

from dataclasses import dataclass
from typing import Optional, Protocol

import astroid  # type: ignore[import-untyped]

from sealed_class_verification.domain.entities import ClassificationResult, TransformationPlan


@dataclass(frozen=True)
class Violation:
    """A rule violation with code, message, location, and fixability."""

    code: str
    message: str
    location: str
    node: astroid.nodes.NodeNG
    result: ClassificationResult
    fixable: bool = False
    fix_failure_reason: Optional[str] = None
    """Reason why an auto-fix is not offered (e.g. 'Marker on a closed class')."""


class BaseRule(Protocol):
    """A single classification rule with optional deterministic fixes."""

    code: str
    description: str

    def check(self, node: astroid.nodes.NodeNG) -> list[Violation]:
        """Interrogate a node for a violation of the rule."""
        ...

    def fix(self, violation: Violation) -> Optional[TransformationPlan]:
        """
        Return a plan ONLY if the resolution is deterministic.

        Returns None otherwise; the Violation carries the reason in fix_failure_reason.
        """
        ...

    def get_fix_instructions(self, violation: Violation) -> str:
        """Provide human instructions for a manual fix."""
        ...
