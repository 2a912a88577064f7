"""Template tags and their expansion."""
