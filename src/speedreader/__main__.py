"""Allow ``python -m speedreader``."""

from speedreader.cli import run

if __name__ == "__main__":
    run()
