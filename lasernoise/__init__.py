"""Laser frequency/phase noise synthesis libraries in Python."""
__version__ = "0.0.1"
