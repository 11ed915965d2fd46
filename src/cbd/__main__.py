"""Allow running cbd with ``python -m cbd``."""

import sys

from .cli import main

sys.exit(main())
