import sys

from mapcaptions.cli import main

sys.exit(main())
