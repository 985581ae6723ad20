"""Runs the calculator in command-line mode, inside the error handling context manager. Called from the calc console
script.

Python version must be >=3.10: tokens and syntax tree nodes are keyword-only-field dataclasses, and error handling
requires that dicts are insertion-ordered.
"""

import argparse
import sys

from calculator.lang.error import ErrorHandler
from calculator.lang.session import Session
from calculator.lang.shell import Shell


def main(argv=None):
    """Runs calculator interpreter. Called from calc console script."""
    assert sys.version_info >= (3, 10), "calc cannot be run with python < 3.10"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="calc", description="Interactive integer calculator.")
        parser.add_argument("--warn-undefined", action="store_true",
                            help="warn when a variable that was never assigned is read (it reads as 0)")
        args = parser.parse_args(argv)

        Shell(Session(error_handler, warn_undefined=args.warn_undefined)).cmdloop()


if __name__ == "__main__":
    main()
