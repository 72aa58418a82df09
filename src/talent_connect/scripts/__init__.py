"""Operational scripts."""
