# File: axumgen/__main__.py
"""
axumgen — Module entry point.

Allows running the generator directly via::

    python -m axumgen --model model.yaml --output ./shop
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from axumgen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
