"""Browser Matrix - picks cloud test browsers from a declarative spec and runs the suite."""

__version__ = "0.1.0"
