"""Tax Curve - German income tax curves and inflation adjustment."""

__version__ = "0.3.0"
