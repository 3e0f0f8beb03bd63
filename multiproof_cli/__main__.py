"""
Module execution entry point.

Allows running with: python -m multiproof_cli
"""

import sys
from multiproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
