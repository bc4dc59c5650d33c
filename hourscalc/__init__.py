"""Hours Calc - pay-period and overtime hour tracking tools."""

__version__ = "0.3.0"
