"""BrickBase marketplace API."""
