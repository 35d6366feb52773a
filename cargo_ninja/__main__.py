"""Module entrypoint: ``python -m cargo_ninja``."""

import sys

from cargo_ninja.CLIApp import main

if __name__ == "__main__":
    sys.exit(main())
