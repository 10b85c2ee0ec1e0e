"""
Flybook DB - versioned data layer for the Flybook flight logbook

Declarative SQLite schema with trigger-maintained optlock columns, a
buffered row container with optimistic-lock commits, and a generator
that creates and seeds the logbook database.
"""

__version__ = "0.1.0"
__author__ = "Flybook"
