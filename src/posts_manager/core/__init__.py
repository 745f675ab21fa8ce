"""Core configuration for the posts manager."""
