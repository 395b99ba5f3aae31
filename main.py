import sys

from shipyard.cli import main

if __name__ == "__main__":
    sys.exit(main())
