"""Downtime primitives, availability aggregation, date presets and charts."""
