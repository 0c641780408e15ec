import sys

from domoschema.cli import main

sys.exit(main())
