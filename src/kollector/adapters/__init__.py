"""Adapters binding the domain to storage and file formats."""
