"""File-backed storage for completed flights and per-aircraft totals."""

import os

from rfflightlog import tabular
from rfflightlog.errors import SchemaError, StorageError
from rfflightlog.models import Aircraft, Flight

FLIGHTS_HEADERS = ['modelId', 'flightIndex', 'flightStartTime', 'flightDurationSeconds', 'capacityUsedMah']

AIRCRAFT_HEADERS = ['modelId', 'numberOfFlights', 'flightDurationSeconds', 'capacityUsedMah']


def headers_match(headers, expected_headers) -> bool:
    """Check that two header rows name the same columns in the same order."""
    return list(headers) == list(expected_headers)


def check_headers_or_initialize(path, expected_headers: list[str]) -> bool:
    """
    Check the header row of a table, creating the table if needed.

    A missing or empty file is initialized with just the header row. Any
    other file, including one starting with a blank line, is compared as is.

    Args:
        path: Path to the table file
        expected_headers: Column names the table must have, in order

    Returns:
        bool: True if the headers match or were written, False otherwise

    Raises:
        StorageError: If the file cannot be read or created
    """
    try:
        with open(path, 'a+', newline='', encoding='utf-8') as f:
            f.seek(0, os.SEEK_END)
            if f.tell() == 0:
                tabular.write_csv_headers_to_file(f, expected_headers)
                return True
            f.seek(0)
            headers = tabular.read_csv_headers_from_file(f)
    except OSError as e:
        raise StorageError(f"Could not open file: {path}") from e

    return headers_match(headers, expected_headers)


class FlightRepository:
    """
    Append-only log of completed flights plus running totals per aircraft.

    Two tables are kept on disk: the flights log, which grows by one row per
    appended flight, and the aircraft table, which holds one row per model and
    is rewritten in full on every append. The two writes are not
    transactional; a failure between them leaves the flights log ahead of the
    aircraft totals.

    Flights are only read into memory on request (``load_flights``). The
    aircraft table is read once on construction and kept in memory.

    Concurrent writers are not supported.
    """

    def __init__(self, flights_path, aircraft_path):
        self.flights_path = flights_path
        self.aircraft_path = aircraft_path
        self.flights: list[Flight] = []

        if not check_headers_or_initialize(self.aircraft_path, AIRCRAFT_HEADERS):
            raise SchemaError(f"Headers of file do not match expected headers: {self.aircraft_path}")

        _, rows = self._read_table(self.aircraft_path)
        self.aircraft: list[Aircraft] = [Aircraft.from_record(row) for row in rows]

    def _read_table(self, path):
        try:
            return tabular.read_csv(path)
        except OSError as e:
            raise StorageError(f"Could not open file: {path}") from e

    def _ensure_flights_table(self):
        if not check_headers_or_initialize(self.flights_path, FLIGHTS_HEADERS):
            raise SchemaError(f"Headers of file do not match expected headers: {self.flights_path}")

    def load_flights(self, model_id: int | None = None, append: bool = False):
        """
        Load flights from the flights table into memory.

        Args:
            model_id: If given, only flights of this model are loaded
            append: If True, add to the flights already in memory instead of
                replacing them. Loading the same rows twice duplicates them.

        Raises:
            StorageError: If the flights table cannot be opened
            SchemaError: If its header does not match the flights columns
        """
        try:
            with open(self.flights_path, 'r', newline='', encoding='utf-8') as f:
                headers = tabular.read_csv_headers_from_file(f)
                if not headers_match(headers, FLIGHTS_HEADERS):
                    raise SchemaError(
                        f"Headers in file do not match expected headers for flights: {self.flights_path}"
                    )

                loaded = []
                for row in tabular.read_csv_rows_from_file(f, headers):
                    flight = Flight.from_record(row)
                    if model_id is not None and flight.model_id != model_id:
                        continue
                    loaded.append(flight)
        except OSError as e:
            raise StorageError(f"Could not open file: {self.flights_path}") from e

        if append:
            self.flights.extend(loaded)
        else:
            self.flights = loaded

    def get_number_of_flights(self, model_id: int | None = None) -> int:
        """
        Count the flights currently held in memory.

        Only flights loaded with ``load_flights`` or appended through this
        repository are counted, not the whole flights table.

        Args:
            model_id: If given, only flights of this model are counted
        """
        if model_id is None:
            return len(self.flights)
        return sum(1 for flight in self.flights if flight.model_id == model_id)

    def get_aircraft(self, model_id: int) -> Aircraft | None:
        for aircraft in self.aircraft:
            if aircraft.model_id == model_id:
                return aircraft
        return None

    def get_last_flight(self) -> Flight | None:
        """
        Read the most recently appended flight from the flights table.

        Returns:
            Flight: The last flight on file, or None if the table is empty
        """
        self._ensure_flights_table()
        try:
            row = tabular.read_last_csv_row(self.flights_path, FLIGHTS_HEADERS)
        except OSError as e:
            raise StorageError(f"Could not open file: {self.flights_path}") from e
        return Flight.from_record(row) if row is not None else None

    def append_flight(self, flight: Flight):
        """
        Append a flight to the log and update the aircraft totals.

        A flight that is not completed yet is finished here with no capacity
        value (0 mAh) at the current time. A flight without an index gets the
        number of flights of its model currently in memory, so callers that
        need indexes to continue the on-disk sequence should call
        ``load_flights(model_id)`` first.

        Args:
            flight: The flight to append

        Raises:
            StorageError: If a table cannot be opened
            SchemaError: If the flights table header does not match
        """
        self._ensure_flights_table()

        if not flight.is_completed:
            flight.finish_flight()

        if flight.flight_index is None:
            flight.assign_index(self.get_number_of_flights(flight.model_id))

        record = flight.to_record()
        try:
            tabular.write_csv_row(self.flights_path, FLIGHTS_HEADERS, record)
        except OSError as e:
            raise StorageError(f"Could not open file: {self.flights_path}") from e
        self.flights.append(flight)

        self.update_aircraft(flight)

    def update_aircraft(self, flight: Flight):
        """
        Fold a completed flight into its aircraft totals and rewrite the
        aircraft table.
        """
        aircraft = self.get_aircraft(flight.model_id)
        if aircraft is None:
            aircraft = Aircraft(model_id=flight.model_id)
            self.aircraft.append(aircraft)

        aircraft.increment_flight_count()
        aircraft.add_flight_duration(flight.flight_duration_seconds or 0)
        aircraft.add_capacity_used(flight.capacity_used_mah or 0)

        try:
            tabular.write_csv(
                self.aircraft_path,
                AIRCRAFT_HEADERS,
                [record.to_record() for record in self.aircraft],
            )
        except OSError as e:
            raise StorageError(f"Could not open file: {self.aircraft_path}") from e

    def __repr__(self):
        return (
            f"<FlightRepository(flights_path={self.flights_path}, "
            f"aircraft_path={self.aircraft_path}, loaded={len(self.flights)})>"
        )
