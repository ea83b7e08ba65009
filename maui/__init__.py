"""maui: diagnose a .NET MAUI development environment."""

__version__ = "0.1.0"
