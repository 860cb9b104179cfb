"""Allow running as ``python -m slnmove``."""

import sys

from slnmove.cli import main

sys.exit(main())
