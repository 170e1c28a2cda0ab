"""Catering booking backend: menu, bookings, receipts, messaging and admin dashboard."""

__version__ = "1.0.0"
