import sys

from pyccsync.cli import main

sys.exit(main())
