"""Allow ``python -m fleetsync``."""

from __future__ import annotations

import sys

from fleetsync.cli import main

sys.exit(main())
