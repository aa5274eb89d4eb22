import sys

from .apps.recorder_player import main

sys.exit(main())
