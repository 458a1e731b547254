import sys

from mygit.main import main

sys.exit(main())
