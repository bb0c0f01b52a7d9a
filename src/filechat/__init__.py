"""FileChat - chat with your uploaded files."""

__version__ = "0.1.0"
