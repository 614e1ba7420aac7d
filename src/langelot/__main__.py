"""
Main entry point for the langelot CLI.

This module is executed when running `python -m langelot` or via the `langelot` executable.
"""

from .cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
