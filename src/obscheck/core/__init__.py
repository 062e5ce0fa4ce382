"""Core models, ports and queries for captured observability data."""
