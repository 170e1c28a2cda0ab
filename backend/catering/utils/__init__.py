"""Shared helpers: clock, money and display codes."""
