"""Entry point: ``python -m kinesim``."""

import sys

from kinesim.demo import main

if __name__ == "__main__":
    sys.exit(main())
