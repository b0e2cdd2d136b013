"""CLI entry points - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer

from sealed_class_verification.domain.config import ConfigurationLoader
from sealed_class_verification.domain.protocols import (
    AstroidProtocol,
    FileSystemProtocol,
    FixerGatewayProtocol,
    TelemetryPort,
)
from sealed_class_verification.domain.rules.designed_for_inheritance import DesignedForInheritanceRule
from sealed_class_verification.interface.reporters import TerminalReporter
from sealed_class_verification.use_cases.apply_fixes import ApplyFixesUseCase
from sealed_class_verification.use_cases.check_inheritance import CheckInheritanceUseCase

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_UNPARSEABLE = 2

_PATHS_ARGUMENT = typer.Argument(None, help="Files or directories to process (default: current directory)")


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    rule: DesignedForInheritanceRule
    astroid_gateway: AstroidProtocol
    filesystem: FileSystemProtocol
    fixer_gateway: FixerGatewayProtocol


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_paths(paths: Optional[List[Path]]) -> list[str]:
        """Explicit paths, else the current directory."""
        if not paths:
            return ["."]
        return [str(path) for path in paths]

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="sealed-class-verification",
            help="Every class must be abstract, @final or static, or decorated with @DesignedForInheritance.",
            add_completion=False,
        )

        def check_use_case() -> CheckInheritanceUseCase:
            return CheckInheritanceUseCase(
                rule=deps.rule,
                astroid_gateway=deps.astroid_gateway,
                filesystem=deps.filesystem,
                config_loader=deps.config_loader,
                telemetry=deps.telemetry,
            )

        @app.callback()
        def main(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
        ) -> None:
            CLIAppFactory.configure_logging(verbose)

        @app.command()
        def check(
            paths: Optional[List[Path]] = _PATHS_ARGUMENT,
            output_format: str = typer.Option("text", "--format", help="Report format: text or json"),
        ) -> None:
            """Report every class that is neither closed nor designed for inheritance."""
            if output_format not in ("text", "json"):
                raise typer.BadParameter("must be 'text' or 'json'", param_hint="--format")
            audit = check_use_case().execute(CLIAppFactory.resolve_target_paths(paths))
            reporter = TerminalReporter(deps.filesystem.relative_path, output_format)
            reporter.report_audit(audit)
            if audit.has_violations():
                raise typer.Exit(code=EXIT_VIOLATIONS)
            if audit.unparseable_files:
                raise typer.Exit(code=EXIT_UNPARSEABLE)

        @app.command()
        def fix(
            paths: Optional[List[Path]] = _PATHS_ARGUMENT,
            diff: bool = typer.Option(False, "--diff", help="Print a unified diff instead of writing files"),
        ) -> None:
            """Seal classes, or mark those with overridable members as designed for inheritance."""
            use_case = ApplyFixesUseCase(
                check_use_case=check_use_case(),
                fixer_gateway=deps.fixer_gateway,
                filesystem=deps.filesystem,
                astroid_gateway=deps.astroid_gateway,
                telemetry=deps.telemetry,
            )
            result = use_case.execute(CLIAppFactory.resolve_target_paths(paths), write=not diff)
            TerminalReporter(deps.filesystem.relative_path).report_fix(result, show_diff=diff)
            if result.unfixable:
                raise typer.Exit(code=EXIT_VIOLATIONS)
            if result.failed_files:
                raise typer.Exit(code=EXIT_UNPARSEABLE)

        return app
