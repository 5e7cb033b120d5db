import sys

from inbox.main import main

sys.exit(main())
