"""Infrastructure layer: persistence and storage adapters."""
