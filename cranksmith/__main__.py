"""
Entry point for running cranksmith as a module.

Usage:
    python -m cranksmith analyze --input setup.json
    python -m cranksmith make-example
    python -m cranksmith serve --port 8000
"""

import sys

from cranksmith.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
