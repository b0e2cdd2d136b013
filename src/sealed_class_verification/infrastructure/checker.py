"""
Pylint plugin entry point - composition root for the checker plugin.

Load with ``pylint --load-plugins=sealed_class_verification.infrastructure.checker``.
"""

from pylint.lint import PyLinter

from sealed_class_verification.infrastructure.di.container import SealedClassContainer
from sealed_class_verification.use_cases.checks.inheritance import DesignedForInheritanceChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = SealedClassContainer.get_instance()
    linter.register_checker(DesignedForInheritanceChecker(linter, rule=container.get_rule()))
