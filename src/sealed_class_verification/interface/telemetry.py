import typer


class ConsoleTelemetry:
    """TelemetryPort that writes progress to stderr, leaving stdout to the report."""

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def step(self, message: str) -> None:
        if not self.quiet:
            typer.secho(message, fg=typer.colors.CYAN, err=True)

    def warning(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.RED, err=True)
