import sys

from py_efgy.cli import main

sys.exit(main())
