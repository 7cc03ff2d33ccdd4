"""Entry point: python -m otto_cli"""

import sys

from otto_cli.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
