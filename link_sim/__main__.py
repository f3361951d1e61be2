import sys

from link_sim.cli import main

sys.exit(main())
