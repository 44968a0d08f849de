"""Packaged resources (framework defaults)."""
