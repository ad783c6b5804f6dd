import sys

from miniref.api import main

sys.exit(main())
