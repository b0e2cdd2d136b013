"""Unit tests for DesignedForInheritanceRule classification and fix selection."""

import pytest

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.entities import (
    ClassificationKind,
    FixKind,
    Modifier,
    SourceLocation,
    TransformationType,
)
from sealed_class_verification.domain.rules.designed_for_inheritance import (
    DesignedForInheritanceRule,
    class_path,
    name_location,
)
from sealed_class_verification.domain.rules.marker_resolver import MarkerResolver
from sealed_class_verification.infrastructure.gateways.astroid_gateway import AstroidGateway
from tests.linter_test_utils import parse_class

MARKER_IMPORT = "from ProductiveRage.SealedClassVerification import DesignedForInheritance\n"


class TestClosingModifiers:
    @pytest.mark.parametrize(
        "code",
        [
            "from typing import final\n@final\nclass Example:\n    pass\n",
            "import typing\n@typing.final\nclass Example:\n    pass\n",
            "from typing_extensions import final\n@final\nclass Example:\n    pass\n",
        ],
    )
    def test_final_decorator_seals(self, rule: DesignedForInheritanceRule, code: str) -> None:
        assert rule.closing_modifiers(parse_class(code)) == frozenset({Modifier.SEALED})

    @pytest.mark.parametrize(
        "code",
        [
            "from abc import ABC\nclass Example(ABC):\n    pass\n",
            "import abc\nclass Example(abc.ABC):\n    pass\n",
            "from abc import ABCMeta\nclass Example(metaclass=ABCMeta):\n    pass\n",
            "from typing import Protocol\nclass Example(Protocol):\n    pass\n",
            "from typing import Protocol, TypeVar\nT = TypeVar('T')\nclass Example(Protocol[T]):\n    pass\n",
        ],
    )
    def test_abstract_shapes(self, rule: DesignedForInheritanceRule, code: str) -> None:
        assert Modifier.ABSTRACT in rule.closing_modifiers(parse_class(code))

    def test_only_static_methods_is_static(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            """
            class Helpers:
                VERSION = 1

                @staticmethod
                def one():
                    return 1

                @staticmethod
                def two():
                    return 2
            """
        )
        assert rule.closing_modifiers(node) == frozenset({Modifier.STATIC})

    def test_one_instance_method_is_not_static(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            """
            class Helpers:
                @staticmethod
                def one():
                    return 1

                def two(self):
                    return 2
            """
        )
        assert rule.closing_modifiers(node) == frozenset()

    def test_class_without_methods_is_not_static(self, rule: DesignedForInheritanceRule) -> None:
        assert rule.closing_modifiers(parse_class("class Example:\n    x = 1\n")) == frozenset()

    def test_several_modifiers(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class("from abc import ABC\nfrom typing import final\n@final\nclass Example(ABC):\n    pass\n")
        assert rule.closing_modifiers(node) == frozenset({Modifier.SEALED, Modifier.ABSTRACT})


class TestClassify:
    def test_plain_class_misses_marker(self, rule: DesignedForInheritanceRule) -> None:
        result = rule.classify(parse_class("class Example:\n    pass\n"))

        assert result.kind is ClassificationKind.MISSING_MARKER
        assert result.class_name == "Example"
        assert result.class_path == "Example"
        assert result.location == SourceLocation(1, 6)
        assert result.is_violation

    def test_sealed_class_passes(self, rule: DesignedForInheritanceRule) -> None:
        result = rule.classify(parse_class("from typing import final\n@final\nclass Example:\n    pass\n"))
        assert result.kind is ClassificationKind.PASS
        assert not result.is_violation

    def test_marked_class_passes(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(MARKER_IMPORT + "@DesignedForInheritance\nclass Example:\n    pass\n")
        assert rule.classify(node).kind is ClassificationKind.PASS

    def test_marked_abstract_class_conflicts(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            MARKER_IMPORT + "from abc import ABC\n@DesignedForInheritance\nclass Example(ABC):\n    pass\n"
        )
        assert rule.classify(node).kind is ClassificationKind.MARKER_ON_CLOSED_CLASS

    def test_marked_final_class_conflicts(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            MARKER_IMPORT + "from typing import final\n@final\n@DesignedForInheritance\nclass Example:\n    pass\n"
        )
        assert rule.classify(node).kind is ClassificationKind.MARKER_ON_CLOSED_CLASS

    @pytest.mark.parametrize(
        "code",
        [
            "from abc import ABCMeta\nclass Example(metaclass=ABCMeta):\n    pass\n",
            "import abc\nclass Example(metaclass=abc.ABCMeta):\n    pass\n",
        ],
    )
    def test_abstract_metaclass_passes(self, rule: DesignedForInheritanceRule, code: str) -> None:
        result = rule.classify(parse_class(code))

        assert result.kind is ClassificationKind.PASS
        assert rule.plan_for(result) is None

    def test_marked_abstract_metaclass_conflicts(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            MARKER_IMPORT
            + "from abc import ABCMeta\n@DesignedForInheritance\nclass Example(metaclass=ABCMeta):\n    pass\n"
        )
        assert rule.classify(node).kind is ClassificationKind.MARKER_ON_CLOSED_CLASS

    def test_unrelated_metaclass_is_not_abstract(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class("class Meta(type):\n    pass\n\n\nclass Example(metaclass=Meta):\n    pass\n")
        assert rule.classify(node).kind is ClassificationKind.MISSING_MARKER

    def test_marked_static_class_conflicts(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            MARKER_IMPORT
            + "@DesignedForInheritance\nclass Helpers:\n    @staticmethod\n    def one():\n        return 1\n"
        )
        assert rule.classify(node).kind is ClassificationKind.MARKER_ON_CLOSED_CLASS

    def test_marker_name_is_case_sensitive(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            "from ProductiveRage import SealedClassVerification\n"
            "designedForInheritance = SealedClassVerification.DesignedForInheritance\n"
            "@designedForInheritance\nclass Example:\n    pass\n"
        )
        assert rule.classify(node).kind is ClassificationKind.MISSING_MARKER

    def test_same_named_local_decorator_is_not_the_marker(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            """
            def DesignedForInheritance(cls):
                return cls

            @DesignedForInheritance
            class Example:
                pass
            """
        )
        assert rule.classify(node).kind is ClassificationKind.MISSING_MARKER

    def test_nested_class_path_and_location(self, rule: DesignedForInheritanceRule) -> None:
        code = """
            from typing import final

            @final
            class Outer:
                class Inner:
                    pass

            def factory():
                class Local:
                    pass
                return Local
            """
        inner = parse_class(code, "Inner")
        local = parse_class(code, "Local")

        assert class_path(inner) == "Outer.Inner"
        assert class_path(local) == "factory.Local"
        assert name_location(inner) == SourceLocation(6, 10)
        assert rule.classify(inner).kind is ClassificationKind.MISSING_MARKER

    @pytest.mark.parametrize(
        "code",
        [
            "from enum import Enum\nclass Color(Enum):\n    RED = 1\n",
            "import enum\nclass Color(enum.IntEnum):\n    RED = 1\n",
            "from typing import NamedTuple\nclass Point(NamedTuple):\n    x: int\n",
            "from typing import TypedDict\nclass Movie(TypedDict):\n    title: str\n",
        ],
    )
    def test_value_types_are_never_classified(self, rule: DesignedForInheritanceRule, code: str) -> None:
        node = parse_class(code)
        assert rule.applies_to(node) is False
        assert rule.check(node) == []
        with pytest.raises(ValueError):
            rule.classify(node)

    def test_extra_value_type_bases_from_config(self) -> None:
        config = ConfigurationLoader({"extra_value_type_bases": ["BaseModel"]})
        rule = DesignedForInheritanceRule(MarkerResolver(AstroidGateway()), config)
        node = parse_class("from pydantic import BaseModel\nclass User(BaseModel):\n    name: str\n")
        assert rule.applies_to(node) is False

    def test_none_is_rejected(self, rule: DesignedForInheritanceRule) -> None:
        with pytest.raises(TypeError):
            rule.classify(None)

    def test_non_class_node_is_not_classified(self, rule: DesignedForInheritanceRule) -> None:
        function = parse_class("class Example:\n    def run(self):\n        pass\n").body[0]
        assert rule.applies_to(function) is False
        assert rule.check(function) == []


class TestSelectFix:
    def test_plain_class_is_sealed(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class("class Example:\n    def run(self):\n        return 1\n")
        assert rule.select_fix(node) is FixKind.SEAL

    def test_abstractmethod_member_gets_marker(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            """
            from abc import abstractmethod

            class Example:
                @property
                @abstractmethod
                def name(self):
                    ...
            """
        )
        assert rule.select_fix(node) is FixKind.ADD_MARKER

    @pytest.mark.parametrize("exc", ["NotImplementedError", "NotImplementedError('subclass')"])
    def test_not_implemented_member_gets_marker(self, rule: DesignedForInheritanceRule, exc: str) -> None:
        node = parse_class(f"class Example:\n    def get_name(self):\n        raise {exc}\n")
        assert rule.select_fix(node) is FixKind.ADD_MARKER

    def test_nested_raise_does_not_count(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(
            """
            class Example:
                def run(self, flag):
                    if flag:
                        raise NotImplementedError
                    return 1
            """
        )
        assert rule.select_fix(node) is FixKind.SEAL

    def test_seal_plan_uses_configured_final_module(self) -> None:
        config = ConfigurationLoader({"final_module": "typing_extensions"})
        rule = DesignedForInheritanceRule(MarkerResolver(AstroidGateway()), config)
        result = rule.classify(parse_class("class Example:\n    pass\n"))

        plan = rule.plan_for(result)

        assert plan.transformation_type is TransformationType.SEAL_CLASS
        assert plan.params == {"class_path": "Example", "final_module": "typing_extensions"}

    def test_marker_plan(self, rule: DesignedForInheritanceRule) -> None:
        result = rule.classify(parse_class("class Example:\n    def run(self):\n        raise NotImplementedError\n"))

        plan = rule.plan_for(result)

        assert plan.transformation_type is TransformationType.ADD_MARKER
        assert plan.params == {
            "class_path": "Example",
            "marker_name": "DesignedForInheritance",
            "marker_namespace": "ProductiveRage.SealedClassVerification",
        }


class TestCheckAndFix:
    def test_missing_marker_violation_is_fixable(self, rule: DesignedForInheritanceRule) -> None:
        violations = rule.check(parse_class("class Example:\n    pass\n"))

        assert len(violations) == 1
        violation = violations[0]
        assert violation.code == "DesignedForInheritance"
        assert violation.location == "1:6"
        assert violation.fixable is True
        assert violation.fix_failure_reason is None
        assert "'Example' must be abstract" in violation.message
        assert rule.fix(violation).transformation_type is TransformationType.SEAL_CLASS

    def test_closed_class_conflict_has_no_fix(self, rule: DesignedForInheritanceRule) -> None:
        node = parse_class(MARKER_IMPORT + "from typing import final\n@final\n@DesignedForInheritance\nclass Example:\n    pass\n")

        violation = rule.check(node)[0]

        assert violation.fixable is False
        assert violation.fix_failure_reason
        assert "must not be decorated" in violation.message
        assert rule.fix(violation) is None
        assert "remove @DesignedForInheritance" in rule.get_fix_instructions(violation)

    def test_passing_class_has_no_violation(self, rule: DesignedForInheritanceRule) -> None:
        assert rule.check(parse_class("from abc import ABC\nclass Example(ABC):\n    pass\n")) == []

    def test_instructions_for_missing_marker(self, rule: DesignedForInheritanceRule) -> None:
        violation = rule.check(parse_class("class Example:\n    pass\n"))[0]
        assert "@final" in rule.get_fix_instructions(violation)
