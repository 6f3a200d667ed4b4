"""Changelog and terminal renderers."""
