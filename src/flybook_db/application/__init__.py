"""Application layer for the Flybook data layer.

Exports:
    Schema:
        - FLYBOOK_TABLES: Column descriptors of the logbook tables
        - flybook_schema: Build the logbook TableSpecs
    Seeding:
        - SampleDataSeeder: Populates the tables with sample rows
        - SeedSummary: Inserted row counts
    Generation:
        - DatabaseGenerator: Create, seed and instrument a database
        - GenerationResult: Outcome of a generator run
"""

from flybook_db.application.flybook_schema import FLYBOOK_TABLES, flybook_schema
from flybook_db.application.generator import DatabaseGenerator, GenerationResult
from flybook_db.application.seed_data import SampleDataSeeder, SeedSummary

__all__ = [
    "FLYBOOK_TABLES",
    "flybook_schema",
    "SampleDataSeeder",
    "SeedSummary",
    "DatabaseGenerator",
    "GenerationResult",
]
