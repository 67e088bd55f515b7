"""Core utilities: logging, exceptions and HTTP middleware."""
