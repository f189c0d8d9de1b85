"""ANRSI portal toolkit: multilingual content editing for the research agency portal."""

__version__ = "1.0.0"
