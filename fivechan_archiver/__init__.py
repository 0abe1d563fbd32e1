"""Thread archiver for 5chan boards on plebbit."""

__version__ = "0.3.0"
