"""Command-line interface for formrules."""
