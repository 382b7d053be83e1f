"""Module entrypoint for ``python -m campaignmap``."""

from campaignmap.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
