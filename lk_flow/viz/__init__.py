"""Flow visualization."""
