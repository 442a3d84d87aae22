import sys

from infodyn.run import main

sys.exit(main())
