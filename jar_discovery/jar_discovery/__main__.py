"""Entry point for `python -m jar_discovery` and `jar-discovery` console script."""

from __future__ import annotations

from jar_discovery.cli import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
