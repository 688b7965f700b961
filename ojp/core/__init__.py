"""Application factory and settings."""
