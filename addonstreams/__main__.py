import sys

from addonstreams.cli import main

sys.exit(main())
