"""Entry point: python -m client_manager"""

import sys

from client_manager.demo import main

sys.exit(main())
