"""Command line interface for dotnetdiag."""
