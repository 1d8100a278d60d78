"""Core full-text search components."""
