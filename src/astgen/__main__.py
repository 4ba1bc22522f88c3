import sys

from astgen.cli import main

sys.exit(main())
