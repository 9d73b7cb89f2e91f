import sys

from ai2gnss.cli import main

sys.exit(main())
