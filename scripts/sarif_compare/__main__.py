import sys

from sarif_compare.cli import main

sys.exit(main())
