"""Run the chapter demos from the command line.

Usage:
    python3 -m magicmethods [--log-level LEVEL] [--list] [chapter ...]

"""

import sys

import magicmethods.invocation

if __name__ == "__main__":
    sys.exit(magicmethods.invocation.run())
