"""Init file for AI services."""
