"""
Classy Module Entry Point
==========================

Allows running the CLI via: python -m classy
"""

from classy.cli import main

if __name__ == "__main__":
    main()
