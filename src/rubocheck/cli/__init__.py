"""Rubocheck command line interface."""
