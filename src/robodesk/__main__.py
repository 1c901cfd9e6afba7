"""`python -m robodesk` launches the desktop shell."""

from robodesk.cli import run

if __name__ == "__main__":
    raise SystemExit(run())
