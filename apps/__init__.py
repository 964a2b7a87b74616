"""HTTP services for book generation."""
