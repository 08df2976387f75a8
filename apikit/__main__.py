import sys

from apikit.cli import main

sys.exit(main())
