"""Pytest configuration and shared fixtures.

pythonpath in pyproject.toml puts src/ on sys.path, which is also where astroid
finds the ProductiveRage marker module when it resolves decorators.
"""

from pathlib import Path

import pytest

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.rules.designed_for_inheritance import DesignedForInheritanceRule
from sealed_class_verification.domain.rules.marker_resolver import MarkerResolver
from sealed_class_verification.infrastructure.di.container import SealedClassContainer
from sealed_class_verification.infrastructure.gateways.astroid_gateway import AstroidGateway

FOREIGN_MARKER_MODULE = '''
def DesignedForInheritance(cls):
    return cls
'''


@pytest.fixture
def astroid_gateway() -> AstroidGateway:
    return AstroidGateway()


@pytest.fixture
def rule(astroid_gateway: AstroidGateway) -> DesignedForInheritanceRule:
    return DesignedForInheritanceRule(MarkerResolver(astroid_gateway), ConfigurationLoader())


@pytest.fixture
def foreign_markers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """An importable third-party module that defines its own DesignedForInheritance."""
    package = tmp_path / "foreign"
    package.mkdir()
    (package / "foreign_markers.py").write_text(FOREIGN_MARKER_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(package))
    return "foreign_markers"


@pytest.fixture(autouse=True)
def _reset_container():
    yield
    SealedClassContainer.reset()
