"""Trade store implementations."""
