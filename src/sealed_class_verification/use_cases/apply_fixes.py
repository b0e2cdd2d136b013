"""Use Case: Apply Fixes to Source Code."""

import difflib
import logging
from typing import Optional

import libcst as cst

from sealed_class_verification.domain.entities import (
    FileDiagnostic,
    FixResult,
    TransformationPlan,
)
from sealed_class_verification.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from sealed_class_verification.use_cases.check_inheritance import CheckInheritanceUseCase

logger = logging.getLogger(__name__)


class ApplyFixesUseCase:
    """
    Fix every missing-marker violation in a set of files.

    Each file is classified once; the resulting plans are handed to the fixer
    gateway together, which composes them into a single rewrite of the file.
    """

    def __init__(
        self,
        check_use_case: CheckInheritanceUseCase,
        fixer_gateway: FixerGatewayProtocol,
        filesystem: FileSystemProtocol,
        astroid_gateway: AstroidProtocol,
        telemetry: Optional[TelemetryPort] = None,
    ) -> None:
        self.check_use_case = check_use_case
        self.fixer_gateway = fixer_gateway
        self.filesystem = filesystem
        self.astroid_gateway = astroid_gateway
        self.telemetry = telemetry

    def plan_file(self, file_path: str) -> Optional[tuple[list[TransformationPlan], list[FileDiagnostic]]]:
        """Plans for the fixable violations of a file plus its unfixable diagnostics; None if unparseable."""
        module = self.astroid_gateway.parse_file(file_path)
        if module is None:
            return None
        rule = self.check_use_case.rule
        plans: list[TransformationPlan] = []
        unfixable: list[FileDiagnostic] = []
        for violation in self.check_use_case.violations_in(module):
            plan = rule.fix(violation)
            if plan is None:
                unfixable.append(
                    FileDiagnostic(
                        file_path,
                        violation.result,
                        violation.message,
                        fixable=False,
                        instructions=rule.get_fix_instructions(violation),
                    )
                )
            else:
                plans.append(plan)
        return plans, unfixable

    def _diff(self, file_path: str, plans: list[TransformationPlan]) -> Optional[str]:
        source = self.filesystem.read_text(file_path)
        new_source = self.fixer_gateway.apply_to_source(source, plans)
        if new_source == source:
            return None
        name = self.filesystem.relative_path(file_path)
        return "".join(
            difflib.unified_diff(
                source.splitlines(keepends=True),
                new_source.splitlines(keepends=True),
                fromfile=f"a/{name}",
                tofile=f"b/{name}",
            )
        )

    def execute(self, paths: list[str], write: bool = True) -> FixResult:
        """Fix all files under paths; with write=False only unified diffs are produced."""
        files = self.check_use_case.collect_files(paths)
        if self.telemetry:
            self.telemetry.step(f"Fixing {len(files)} file(s)")

        modified: list[str] = []
        failed: list[str] = []
        unfixable_all: list[FileDiagnostic] = []
        diffs: dict[str, str] = {}
        classes_fixed = 0

        for file_path in files:
            planned = self.plan_file(file_path)
            if planned is None:
                failed.append(file_path)
                if self.telemetry:
                    self.telemetry.error(f"Cannot parse {self.filesystem.relative_path(file_path)}, skipped")
                continue
            plans, unfixable = planned
            unfixable_all.extend(unfixable)
            if not plans:
                continue

            if write:
                changed = self.fixer_gateway.apply_fixes(file_path, plans)
            else:
                try:
                    diff = self._diff(file_path, plans)
                except (cst.ParserSyntaxError, OSError, UnicodeDecodeError) as exc:
                    logger.warning("Cannot fix %s: %s", file_path, exc)
                    failed.append(file_path)
                    continue
                changed = diff is not None
                if diff is not None:
                    diffs[file_path] = diff

            if changed:
                modified.append(file_path)
                classes_fixed += len(plans)
                if self.telemetry and write:
                    self.telemetry.step(f"Fixed {len(plans)} class(es) in {self.filesystem.relative_path(file_path)}")
            elif write:
                logger.warning("No change written to %s for %d planned fix(es)", file_path, len(plans))

        if modified:
            self.astroid_gateway.clear_inference_cache()
        return FixResult(
            files_modified=modified,
            classes_fixed=classes_fixed,
            unfixable=unfixable_all,
            failed_files=failed,
            diffs=diffs,
        )
