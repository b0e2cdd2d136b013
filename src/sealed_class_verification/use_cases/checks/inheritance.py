"""Designed-for-inheritance checks (W9701, W9702)."""

from typing import TYPE_CHECKING, Optional

import astroid  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from pylint.lint import PyLinter

from pylint.checkers import BaseChecker

from sealed_class_verification.domain.constants import MESSAGES, PYLINT_MESSAGE_IDS
from sealed_class_verification.domain.entities import ClassificationKind
from sealed_class_verification.domain.rules.designed_for_inheritance import DesignedForInheritanceRule
from sealed_class_verification.infrastructure.di.container import SealedClassContainer


class DesignedForInheritanceChecker(BaseChecker):
    """W9701/W9702: classes are closed or explicitly designed for inheritance, never both."""

    name: str = "designed-for-inheritance"
    msgs = {
        msgid: (
            MESSAGES[kind],
            symbol,
            "Classes must be abstract, @final or static, or opened on purpose with "
            "@DesignedForInheritance; a closed class must not carry the marker.",
        )
        for kind, (msgid, symbol) in PYLINT_MESSAGE_IDS.items()
    }

    def __init__(self, linter: "PyLinter", rule: Optional[DesignedForInheritanceRule] = None) -> None:
        super().__init__(linter)
        self.rule = rule or SealedClassContainer.get_instance().get_rule()

    def visit_classdef(self, node: astroid.nodes.ClassDef) -> None:
        if not self.rule.applies_to(node):
            return
        result = self.rule.classify(node)
        if result.kind is ClassificationKind.PASS:
            return
        _, symbol = PYLINT_MESSAGE_IDS[result.kind]
        self.add_message(symbol, node=node, args=(result.class_name,))
