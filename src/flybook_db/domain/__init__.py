"""Domain layer - schema model, rows and versioned persistence logic."""
