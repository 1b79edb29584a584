"""Command line entry point for grocery-scan."""
