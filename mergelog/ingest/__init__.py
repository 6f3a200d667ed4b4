"""Fragment discovery and ingestion."""
