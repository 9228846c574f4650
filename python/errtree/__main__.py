"""Allow `python -m errtree`."""

import sys

from errtree.cli import main

sys.exit(main())
