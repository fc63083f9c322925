"""Allow ``python -m collage_toolkit``."""

import sys

from collage_toolkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
