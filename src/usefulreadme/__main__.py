"""Run the usefulreadme CLI with python -m usefulreadme."""

import sys

from usefulreadme.cli import main

if __name__ == "__main__":
    main(sys.argv[1:])
