"""Business logic: pure aggregation helpers and database-backed services."""
