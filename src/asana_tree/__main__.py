import sys

from asana_tree.cli import main

sys.exit(main())
