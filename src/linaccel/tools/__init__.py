"""Command-line helpers: offline log replay and a live rate probe."""
