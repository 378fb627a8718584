import sys

from src.jfifdump.cli import main

if __name__ == "__main__":
    sys.exit(main())
