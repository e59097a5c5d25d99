"""
Background jobs.

Dramatiq broker, actors, worker entry point and scheduler.
"""
