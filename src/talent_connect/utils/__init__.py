"""Utility helpers for the Talent Connect application."""
