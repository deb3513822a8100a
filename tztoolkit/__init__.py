"""
tztoolkit - timezone conversion, parsing and meeting scheduling toolkit.
"""

__version__ = "1.0.0"
