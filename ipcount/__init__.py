"""Count distinct network addresses in line-delimited text files."""

__version__ = "0.1.0"
