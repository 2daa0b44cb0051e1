"""Rubocheck: run RuboCop and capture its findings."""

__version__ = "0.1.0-dev"
