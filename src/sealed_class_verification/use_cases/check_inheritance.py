"""Use Case: Classify every class in a set of files."""

import logging
from typing import Optional

import astroid  # type: ignore[import-untyped]

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.entities import AuditResult, FileDiagnostic
from sealed_class_verification.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    TelemetryPort,
)
from sealed_class_verification.domain.rules import Violation
from sealed_class_verification.domain.rules.designed_for_inheritance import DesignedForInheritanceRule

logger = logging.getLogger(__name__)


class CheckInheritanceUseCase:
    """Run the designed-for-inheritance rule over files and collect diagnostics."""

    def __init__(
        self,
        rule: DesignedForInheritanceRule,
        astroid_gateway: AstroidProtocol,
        filesystem: FileSystemProtocol,
        config_loader: ConfigurationLoader,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.rule = rule
        self.astroid_gateway = astroid_gateway
        self.filesystem = filesystem
        self.config_loader = config_loader
        self.telemetry = telemetry

    def violations_in(self, module: astroid.nodes.Module) -> list[Violation]:
        """Violations for every class in the module, nested classes included, in source order."""
        violations: list[Violation] = []
        for node in module.nodes_of_class(astroid.nodes.ClassDef):
            violations.extend(self.rule.check(node))
        return violations

    def collect_files(self, paths: list[str]) -> list[str]:
        files: list[str] = []
        for path in paths:
            for file_path in self.filesystem.glob_python_files(path, self.config_loader.exclude):
                if file_path not in files:
                    files.append(file_path)
        return files

    def execute(self, paths: list[str]) -> AuditResult:
        files = self.collect_files(paths)
        if self.telemetry:
            self.telemetry.step(f"Checking {len(files)} file(s)")

        diagnostics: list[FileDiagnostic] = []
        unparseable: list[str] = []
        for file_path in files:
            module = self.astroid_gateway.parse_file(file_path)
            if module is None:
                unparseable.append(file_path)
                if self.telemetry:
                    self.telemetry.warning(f"Cannot parse {self.filesystem.relative_path(file_path)}, skipped")
                continue
            for violation in self.violations_in(module):
                diagnostics.append(
                    FileDiagnostic(
                        file_path=file_path,
                        result=violation.result,
                        message=violation.message,
                        fixable=violation.fixable,
                    )
                )
        logger.debug("%d violation(s) in %d file(s)", len(diagnostics), len(files))
        return AuditResult(diagnostics=diagnostics, files_checked=len(files), unparseable_files=unparseable)
