import sys

from histgrep.cli import main

sys.exit(main())
