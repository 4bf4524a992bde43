"""Identifier parsing helpers."""
