"""
Main entry point for the assetsync CLI.
"""

from assetsync.cli import cli


def main() -> None:
    """Main function for the assetsync CLI."""
    cli()


if __name__ == "__main__":
    main()
