"""Matching, scheduling and booking-conflict engines."""
