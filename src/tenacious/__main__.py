"""Module entrypoint for `python -m tenacious`."""

from tenacious.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
