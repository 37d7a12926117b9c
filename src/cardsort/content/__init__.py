"""Bundled reference card data."""
