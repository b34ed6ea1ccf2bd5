"""Admin back-office for the documentation site: login throttling and session auth."""

__version__ = "0.1.0"
