"""Gym lesson calendar, bookings, subscriber accounts and monthly reports."""

__version__ = "1.0.0"