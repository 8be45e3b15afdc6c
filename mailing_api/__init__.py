"""
Mailing entries API: store, send and expire mailing entries.
"""

__version__ = "0.1.0"
