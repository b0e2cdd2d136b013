"""Terminal reporting for check and fix runs."""

import json
from typing import Callable

import typer

from sealed_class_verification.domain.constants import RULE_ID
from sealed_class_verification.domain.entities import AuditResult, FileDiagnostic, FixResult


class TerminalReporter:
    """Renders diagnostics as ``path:line:col: RULE: message`` lines, or as JSON."""

    def __init__(self, relative_path: Callable[[str], str], output_format: str = "text") -> None:
        self._relative_path = relative_path
        self.output_format = output_format

    def format_diagnostic(self, diagnostic: FileDiagnostic) -> str:
        location = diagnostic.result.location
        return (
            f"{self._relative_path(diagnostic.file_path)}:{location.lineno}:{location.col_offset}: "
            f"{RULE_ID}: {diagnostic.message}"
        )

    def report_audit(self, audit: AuditResult) -> None:
        if self.output_format == "json":
            payload = {
                "files_checked": audit.files_checked,
                "unparseable_files": [self._relative_path(p) for p in audit.unparseable_files],
                "violations": [
                    {**d.to_dict(), "file": self._relative_path(d.file_path)} for d in audit.diagnostics
                ],
            }
            typer.echo(json.dumps(payload, indent=2))
            return

        for diagnostic in audit.diagnostics:
            typer.echo(self.format_diagnostic(diagnostic))
        for file_path in audit.unparseable_files:
            typer.secho(f"{self._relative_path(file_path)}: could not be parsed", fg=typer.colors.YELLOW)
        fixable = sum(1 for d in audit.diagnostics if d.fixable)
        summary = (
            f"{len(audit.diagnostics)} violation(s) in {audit.files_checked} file(s), "
            f"{fixable} fixable with 'fix'"
        )
        typer.secho(summary, fg=typer.colors.RED if audit.has_violations() else typer.colors.GREEN)

    def report_fix(self, result: FixResult, show_diff: bool = False) -> None:
        if show_diff:
            for diff in result.diffs.values():
                typer.echo(diff, nl=False)
        for diagnostic in result.unfixable:
            typer.echo(f"{self.format_diagnostic(diagnostic)} (manual fix required)")
            if diagnostic.instructions:
                typer.echo(f"    {diagnostic.instructions}")
        for file_path in result.failed_files:
            typer.secho(f"{self._relative_path(file_path)}: could not be fixed", fg=typer.colors.YELLOW)
        verb = "would fix" if show_diff else "fixed"
        typer.secho(
            f"{verb} {result.classes_fixed} class(es) in {len(result.files_modified)} file(s)",
            fg=typer.colors.GREEN,
        )
