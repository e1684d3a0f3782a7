"""
Package entry point.

Allows running the application via:

    python -m coursereg

This simply forwards execution to coursereg.cli.main().
"""

from coursereg.cli import main

if __name__ == "__main__":
    main()
