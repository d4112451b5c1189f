"""
Classy Shared Module
====================

Configuration, logging and console helpers shared by the Classy
decoder, engine and command line interface.
"""

from shared.config import ClassyConfig

__all__ = ["ClassyConfig"]
