"""Run the hostkeeper command group via ``python -m hostkeeper``."""

from __future__ import annotations

from .cli import cli


def main() -> None:  # pragma: no cover
    cli(prog_name="hostkeeper")


if __name__ == "__main__":  # pragma: no cover
    main()
