"""Declarative Base for the TaskTrack tables (engine and sessions live in infrastructure/database.py)."""
