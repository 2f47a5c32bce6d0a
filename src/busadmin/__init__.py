"""Bus company back-office route desk."""

__version__ = "0.1.0"
