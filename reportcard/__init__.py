"""reportcard - grade the quality of a Python source tree."""

__version__ = "1.0.0"
