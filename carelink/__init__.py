"""CareLink identity and admission API."""

__version__ = "0.1.0"
