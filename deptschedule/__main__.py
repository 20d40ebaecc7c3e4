"""
Package entry point.

Allows running the application via:

    python -m deptschedule

This simply forwards execution to deptschedule.cli.main().
"""

from deptschedule.cli import main

if __name__ == "__main__":
    main()
