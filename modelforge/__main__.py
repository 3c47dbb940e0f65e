# File: modelforge/__main__.py
"""
ModelForge - Module entry point.

Allows running the generator directly via::

    python -m modelforge --model shop.yaml --output ./generated

This module simply delegates to the CLI entry point defined in ``modelforge.cli``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from modelforge.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
