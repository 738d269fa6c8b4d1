import sys

from rbr.cli import main

sys.exit(main())
