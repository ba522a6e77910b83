"""Financial formula library with IRR/XIRR root finding."""

__version__ = "0.1.0"
