"""JSON surface of the posts manager."""
