"""Entry point for running fetchplay as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the fetchplay CLI application."""
    app()


if __name__ == "__main__":
    main()
