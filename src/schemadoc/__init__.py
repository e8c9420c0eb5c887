"""Database schema documentation graph."""
