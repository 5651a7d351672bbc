"""MBA Command Center backend."""
