"""AI Calendar application package."""

from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__", "main"]


def main() -> None:
    from .cli import main as cli_main

    cli_main()
