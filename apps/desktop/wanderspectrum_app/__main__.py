"""``python -m wanderspectrum_app`` and the ``wanderspectrum`` console script."""

from __future__ import annotations

import sys

if __package__:
    from .cli import main as cli_main
else:
    # executed as a plain file (runpy, frozen builds)
    from wanderspectrum_app.cli import main as cli_main

DEFAULT_ARGS = ("run",)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    return int(cli_main(args or list(DEFAULT_ARGS)))


if __name__ == "__main__":
    raise SystemExit(main())
