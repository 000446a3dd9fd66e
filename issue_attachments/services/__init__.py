"""Pipeline stages: URL extraction, download, naming and ingestion."""
