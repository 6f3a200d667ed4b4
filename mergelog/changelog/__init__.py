"""Changelog fragment parsing and section aggregation."""
