"""Module entrypoint for `python -m climsg`."""

from __future__ import annotations

import sys

from climsg.cli import main


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
