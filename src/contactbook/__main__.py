"""Allow running with ``python -m contactbook``."""

import sys

from .main import main

sys.exit(main())
