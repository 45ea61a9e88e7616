"""Command-line interface for icounter."""
