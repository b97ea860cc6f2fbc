"""flowblog: markdown posts, home feed, comments and abuse reports."""

__version__ = "0.1.0"
