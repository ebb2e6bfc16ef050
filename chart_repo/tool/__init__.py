"""Command line tool for running and maintaining a chart repository."""
