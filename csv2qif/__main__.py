import sys

from csv2qif.cli import main

sys.exit(main())
