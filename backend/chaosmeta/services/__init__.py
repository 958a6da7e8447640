"""Metadata registry services."""
