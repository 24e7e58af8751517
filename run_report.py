"""
SysInventory Report Entry Point
Runs the full inventory report and exits with its status code.
"""
import sys
import os

sys.path.insert(0, os.getcwd())

from sysinventory.main import main

if __name__ == "__main__":
    sys.exit(main())
