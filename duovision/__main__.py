import sys

from duovision.cli import main

sys.exit(main())
