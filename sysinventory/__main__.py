import sys

from sysinventory.main import main

if __name__ == "__main__":
    sys.exit(main())
