import sys

from dress_checklist.cli import main

sys.exit(main())
