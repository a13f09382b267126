"""Document-to-shape mapping validation."""
