"""Career WAR by birthplace: ingestion, reference matching and aggregation."""

__version__ = "0.1.0"
