"""Signify - youth homelessness risk tracking backend"""

__version__ = "1.0.0"
