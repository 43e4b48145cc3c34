"""Configuration for mbox ingestion."""
