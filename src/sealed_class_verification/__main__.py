"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from sealed_class_verification.infrastructure.di.container import SealedClassContainer
from sealed_class_verification.interface.cli import CLIAppFactory, CLIDependencies
from sealed_class_verification.interface.telemetry import ConsoleTelemetry


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = SealedClassContainer.get_instance()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=ConsoleTelemetry(),
        rule=container.get_rule(),
        astroid_gateway=container.get_astroid_gateway(),
        filesystem=container.get_filesystem_gateway(),
        fixer_gateway=container.get_fixer_gateway(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
