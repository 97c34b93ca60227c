"""Console presentation for Soulstone."""
