"""The Flybook logbook schema."""

from __future__ import annotations

from flybook_db.domain.entities import TableSpec
from flybook_db.domain.services.schema_descriptor import SchemaParseError, build_schema

# fmt: off
FLYBOOK_TABLES: list[tuple[str, list[str]]] = [
    ("Users", [
        "username           TEXT            PRIMARY KEY",
        "passwd             TEXT",
        "passwd_salt        TEXT",
        "firstname          TEXT",
        "lastname           TEXT",
        "role               TINYINT",
        "email              TEXT",
        "optlock            INTEGER         @VERSION",
    ]),
    ("FlightEntries", [
        "flight_id          INTEGER         PRIMARY KEY",
        "username           TEXT            REFERENCES Users (c_username)",
        "date               DATETIME",
        "aircraft           TEXT            REFERENCES Aircrafts (c_register)",
        "departure_time     DATETIME",
        "departure_airport  INTEGER",
        "landing_time       DATETIME",
        "landing_airport    INTEGER",
        "onblock_time       INTEGER",
        "offblock_time      INTEGER",
        "flight_type        INTEGER",
        "ifr_time           TEXT",
        "notes              TEXT",
        "optlock            INTEGER         @VERSION",
    ]),
    ("Airports", [
        "id                 INTEGER         PRIMARY KEY",
        "code               CHAR(4)",
        "country            TEXT",
        "city               TEXT",
        "name               TEXT",
        "location           TEXT",
        "optlock            INTEGER         @VERSION",
    ]),
    ("Aircrafts", [
        "register           TEXT            PRIMARY KEY",
        "class              INTEGER",
        "capacity           INTEGER",
        "weight             INTEGER",
        "optlock            INTEGER         @VERSION",
    ]),
]
# fmt: on


def flybook_schema(diagnostics: list[SchemaParseError] | None = None) -> list[TableSpec]:
    """Build the Flybook tables in creation order."""
    return build_schema(FLYBOOK_TABLES, diagnostics)
