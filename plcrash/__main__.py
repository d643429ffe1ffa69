"""Allow ``python -m plcrash``."""

import sys

from plcrash.cli import main

sys.exit(main())
