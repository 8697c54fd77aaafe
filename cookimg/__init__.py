"""Build, test and publish the CookCLI container image."""

__version__ = "0.1.0"
