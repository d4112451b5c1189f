"""
Classy Output
==============

Rich console rendering and JSON report generation for decoded class
files.
"""

from classy.output.console import ClassyConsoleOutput, describe_entry
from classy.output.report import ClassyReportGenerator

__all__ = ["ClassyConsoleOutput", "ClassyReportGenerator", "describe_entry"]
