"""
Sheetbase - spreadsheet-backed tabular datastore.

Treats each sheet of a remote spreadsheet as a schema-less table whose
header row defines its columns.
"""

__version__ = "0.1.0"
