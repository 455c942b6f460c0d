"""Core — task rules, views and boundary protocols.

Nothing here awaits, touches the database or imports from services/, api/ or
infrastructure/. Checks return a TaskTrackError (or None) instead of raising, so
services can chain them and surface the first failure.
"""
