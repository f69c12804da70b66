"""Entry point for `python -m chromash`."""

import sys


def main():
    from chromash.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
