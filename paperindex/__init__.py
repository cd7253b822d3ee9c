"""
Personal PDF reference library.

Indexes PDF files whose names encode year, authors, venue and topic into a
hand-editable YAML store, keeps a JSON projection of it for searching, and
opens papers and their annotation records in external tools.
"""

__version__ = "1.0.0"
