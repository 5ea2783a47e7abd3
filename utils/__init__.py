"""Input validation and console rendering helpers for the library CLI."""
