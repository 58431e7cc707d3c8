"""Remote scripting surface for a clipboard-history service."""

__version__ = "0.4.0"
PROGRAM_NAME = "clipdrive clipboard scripting"
