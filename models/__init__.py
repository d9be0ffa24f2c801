"""Profiles, availability vocabulary and the result types of the engines."""
