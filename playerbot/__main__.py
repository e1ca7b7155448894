import sys

from playerbot.main import main

sys.exit(main())
