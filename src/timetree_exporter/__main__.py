"""Entry point for running timetree_exporter as a module.

Usage: python -m timetree_exporter export --email you@example.com
"""

from timetree_exporter.cli import main

if __name__ == "__main__":
    main()
