"""Entry point for ``python -m udflint``."""

import sys

from udflint.main import main

if __name__ == "__main__":
    sys.exit(main())
