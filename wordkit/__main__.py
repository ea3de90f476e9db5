import sys

from wordkit.cli import main

sys.exit(main())
