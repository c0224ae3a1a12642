import sys

from better_next_app.cli import main

sys.exit(main())
