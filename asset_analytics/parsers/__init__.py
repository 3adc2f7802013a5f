"""Loaders for maintenance activity records."""
