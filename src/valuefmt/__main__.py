import sys

from valuefmt.cli import main

sys.exit(main())
