"""Event photo relay: forwards guest uploads into a Google Drive folder."""

__version__ = "0.1.0"
