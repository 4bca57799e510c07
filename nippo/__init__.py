"""nippo: daily GitHub activity report generator."""

__version__ = "0.1.0"
