"""Runs .py-like files with the minipy interpreter, or starts command-line mode. Also uses the error handling context
manager. Called from the minipy console script.

Python version must be >=3.7, because error handling requires that dicts are insertion-ordered and nodes are
dataclasses.
"""

import argparse
import os
import sys

from minipy import __version__
from minipy.lang.error import ErrorHandler
from minipy.lang.session import Session
from minipy.lang.shell import Shell, echoes


def build_parser():
    parser = argparse.ArgumentParser(prog="minipy", description="minimal Python-like interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-c", "--command", help="program passed in as string")
    parser.add_argument("--no-color", action="store_true", help="disable colored error output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_results(sess):
    while sess.results:
        result = sess.pop()
        if echoes(result):
            print(result)


def main(argv=None):
    """Runs minipy interpreter. Called from minipy executable script."""
    assert sys.version_info >= (3, 7), "minipy cannot be run with python < 3.7"

    args = build_parser().parse_args(argv)
    if args.no_color:
        os.environ["NO_COLOR"] = "1"  # honoured by termcolor

    with ErrorHandler() as error_handler:
        if args.command is not None:
            sess = Session(error_handler, "<string>", cmd_line=True)
            error_handler.fatal = True
            try:
                sess.add(args.command)
                sess.run()
            finally:
                print_results(sess)

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)
            try:
                sess.run()
            finally:
                print_results(sess)

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
