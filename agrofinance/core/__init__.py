"""Core infrastructure: configuration, logging, database and security."""
