"""Allow ``python -m changerelease``."""

from changerelease.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
