"""Database schema, sessions and repository functions."""
