"""Sample data for a freshly generated Flybook database.

Every table is populated through a ``RowBuffer`` and committed as one
batch, so a seeding failure leaves the table empty rather than half
filled. Random choices come from the ``random.Random`` passed in, which
makes a seeded database reproducible.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from flybook_db.domain.entities import TableSpec
from flybook_db.domain.services.ddl_generator import Naming
from flybook_db.domain.services.row_buffer import RowBuffer, VersioningMode
from flybook_db.infrastructure.logging import get_logger
from flybook_db.infrastructure.metrics import MetricsRegistry
from flybook_db.ports.outbound.connection_provider import ConnectionProvider

logger = get_logger(__name__)

FIRST_NAMES = ("Andre", "Konstantin", "John", "Stephen", "Neil", "Michio")
LAST_NAMES = ("Konstantin", "Novoselov", "Venter", "Hawking", "Tyson", "Kaku")

# (code, country, city, name, location)
AIRPORTS = (
    ("EFHK", "Finland", "Helsinki", "Helsinki Vantaa", "60.3172,24.9633"),
    ("EFTP", "Finland", "Tampere", "Tampere Pirkkala", "61.4141,23.6044"),
    ("EFOU", "Finland", "Oulu", "Oulu", "64.9301,25.3546"),
    ("EFTU", "Finland", "Turku", "Turku", "60.5141,22.2628"),
    ("EFJY", "Finland", "Jyvaskyla", "Jyvaskyla", "62.3995,25.6783"),
    ("EFRO", "Finland", "Rovaniemi", "Rovaniemi", "66.5648,25.8304"),
    ("ESSA", "Sweden", "Stockholm", "Arlanda", "59.6519,17.9186"),
    ("ENGM", "Norway", "Oslo", "Gardermoen", "60.1939,11.1004"),
    ("EKCH", "Denmark", "Copenhagen", "Kastrup", "55.6179,12.6560"),
    ("EETN", "Estonia", "Tallinn", "Lennart Meri Tallinn", "59.4133,24.8328"),
)

AIRCRAFT_REGISTER = "REG123"
USER_ROLE = 0


def make_username(first: str, last: str) -> str:
    return (first[:3] + last[:3]).lower()


@dataclass
class SeedSummary:
    """Number of rows inserted per table."""

    users: int = 0
    airports: int = 0
    aircraft: int = 0
    flights: int = 0


class SampleDataSeeder:
    """Populates the Flybook tables with sample rows.

    Tables are seeded in dependency order: users, airports, aircraft,
    then one flight per user between two distinct random airports.
    Password columns are left unset.

    Example:
        >>> seeder = SampleDataSeeder(schema, provider, random.Random(0))
        >>> seeder.seed().users
        36
    """

    def __init__(
        self,
        schema: Sequence[TableSpec],
        connections: ConnectionProvider,
        rng: random.Random,
        naming: Naming | None = None,
        versioning: VersioningMode = "trigger",
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self._tables = {table.name: table for table in schema}
        self._connections = connections
        self._rng = rng
        self._naming = naming or Naming()
        self._versioning = versioning
        self._metrics = metrics

    def buffer(self, table_name: str) -> RowBuffer:
        """Open a row buffer over one of the schema's tables."""
        return RowBuffer(
            self._tables[table_name],
            self._connections,
            naming=self._naming,
            versioning=self._versioning,
            metrics=self._metrics,
        )

    def seed(self) -> SeedSummary:
        """Seed all tables and return the inserted row counts."""
        summary = SeedSummary(
            users=self.seed_users(),
            airports=self.seed_airports(),
            aircraft=self.seed_aircraft(),
        )
        summary.flights = self.seed_flights()
        logger.info(
            "sample_data_seeded",
            users=summary.users,
            airports=summary.airports,
            aircraft=summary.aircraft,
            flights=summary.flights,
        )
        return summary

    def seed_users(self) -> int:
        users = self.buffer("Users")
        for first in FIRST_NAMES:
            for last in LAST_NAMES:
                row = users.add_row()
                users.set_string(row, "username", make_username(first, last))
                users.set_string(row, "firstname", first)
                users.set_string(row, "lastname", last)
                users.set_int(row, "role", USER_ROLE)
                users.set_string(row, "email", f"{first}.{last}@mail.com")
        return len(users.commit())

    def seed_airports(self) -> int:
        airports = self.buffer("Airports")
        for code, country, city, name, location in AIRPORTS:
            row = airports.add_row()
            airports.set_string(row, "code", code)
            airports.set_string(row, "country", country)
            airports.set_string(row, "city", city)
            airports.set_string(row, "name", name)
            airports.set_string(row, "location", location)
        return len(airports.commit())

    def seed_aircraft(self) -> int:
        aircraft = self.buffer("Aircrafts")
        row = aircraft.add_row()
        aircraft.set_string(row, "register", AIRCRAFT_REGISTER)
        aircraft.set_string(row, "class", "Light Single Engine")
        aircraft.set_int(row, "capacity", 4)
        aircraft.set_int(row, "weight", 1000)
        return len(aircraft.commit())

    def seed_flights(self) -> int:
        airport_ids = [row_id.key for row_id in self.buffer("Airports").row_ids()]
        usernames = [row_id.key for row_id in self.buffer("Users").row_ids()]

        flights = self.buffer("FlightEntries")
        for username in usernames:
            departure_offset = 10 + self._rng.randrange(20)  # minutes
            fly_time = 15 + self._rng.randrange(500)  # minutes
            departure, landing = self._pick_airports(airport_ids)

            row = flights.add_row()
            flights.set_string(row, "username", username)
            flights.set_expression(row, "date", "strftime('%s','now')")
            flights.set_string(row, "aircraft", AIRCRAFT_REGISTER)
            flights.set_expression(
                row, "departure_time", f"strftime('%s', 'now', '{departure_offset} minutes')"
            )
            flights.set_expression(
                row,
                "landing_time",
                f"strftime('%s', 'now', '{departure_offset + fly_time} minutes')",
            )
            flights.set_int(row, "departure_airport", departure)
            flights.set_int(row, "landing_airport", landing)
            flights.set_int(row, "onblock_time", 1)
            flights.set_int(row, "offblock_time", 0)
            flights.set_int(row, "flight_type", 0)
            flights.set_string(row, "notes", "")
        return len(flights.commit())

    def _pick_airports(self, airport_ids: Sequence[int]) -> tuple[int, int]:
        if len(airport_ids) < 2:
            return 1, 1
        departure = self._rng.choice(airport_ids)
        landing = self._rng.choice(airport_ids)
        while landing == departure:
            landing = self._rng.choice(airport_ids)
        return departure, landing
