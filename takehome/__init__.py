"""Take-home pay and withholding planning."""

__version__ = "0.1.0"
