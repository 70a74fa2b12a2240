"""Filter chain for catalog records."""
