"""Entry point for running the Tumblr client as a module.

Allows running with: python -m src.tumblr <blog>
"""

import sys

from src.tumblr.cli import main

if __name__ == "__main__":
    sys.exit(main())
