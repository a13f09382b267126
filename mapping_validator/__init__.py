"""Structural mapping validation for JSON and XML documents."""
