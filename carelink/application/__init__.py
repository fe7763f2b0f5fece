"""Application layer: use cases, upload ingestion, bootstrap."""
