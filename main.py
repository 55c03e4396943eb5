import sys

from fitting_room.cli import main


if __name__ == "__main__":
    sys.exit(main())
