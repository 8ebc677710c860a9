"""CLI package for junit-annotator."""

from junit_annotator.cli.app import app


def main() -> None:
    """Main entry point for the CLI."""
    app()


__all__ = ["app", "main"]
