"""Flight and aircraft models for the flight log."""

import time
from datetime import datetime, timezone
from enum import Enum

from rfflightlog.errors import FlightStateError, SchemaError


def _now() -> int:
    return int(time.time())


def _parse_number(record: dict, column: str):
    """
    Parse a table field into an int or float; empty fields become None.

    Raises:
        SchemaError: If the field is not a number
    """
    value = record.get(column)
    if value is None or value == '':
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError as e:
        raise SchemaError(f"Invalid number in column {column}: {value!r}") from e


def _format_time(timestamp) -> str:
    if timestamp is None:
        return 'None'
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime('"%Y-%m-%d %H:%M:%S"')


class FlightState(Enum):
    """Lifecycle state of a flight."""

    UNSTARTED = 'unstarted'
    SEGMENT_OPEN = 'segment_open'
    SEGMENT_CLOSED = 'segment_closed'
    COMPLETED = 'completed'


class Flight:
    """
    A single flight, timed as one or more airborne segments.

    A flight starts either explicitly with ``start_flight`` (e.g. on arming)
    or implicitly with its first segment. Duration only accumulates while a
    segment is open. ``finish_flight`` closes any open segment, records the
    capacity used and makes the flight immutable.
    """

    def __init__(
        self,
        flight_index: int | None = None,
        model_id: int = -1,
        battery_id: int | None = None,
        flight_start_time: int | None = None,
        flight_segment_start_time: int | None = None,
        flight_duration_seconds: float = 0,
        capacity_used_mah: float = 0,
        is_completed: bool = False,
    ):
        self.flight_index = flight_index
        self.model_id = model_id
        self.battery_id = battery_id
        self.flight_start_time = flight_start_time
        self.flight_segment_start_time = flight_segment_start_time
        self.flight_duration_seconds = flight_duration_seconds
        self.capacity_used_mah = capacity_used_mah
        self.is_completed = is_completed

    def __setattr__(self, name, value):
        if getattr(self, 'is_completed', False):
            raise FlightStateError(f"Cannot set {name}. Flight is already completed.")
        super().__setattr__(name, value)

    @classmethod
    def from_record(cls, record: dict) -> 'Flight':
        """
        Rebuild a completed flight from a persisted row.

        Args:
            record: Row dict keyed by column name, values as strings

        Returns:
            Flight: A completed flight
        """
        model_id = _parse_number(record, 'modelId')
        return cls(
            flight_index=_parse_number(record, 'flightIndex'),
            model_id=-1 if model_id is None else model_id,
            battery_id=_parse_number(record, 'batteryId'),
            flight_start_time=_parse_number(record, 'flightStartTime'),
            flight_duration_seconds=_parse_number(record, 'flightDurationSeconds') or 0,
            capacity_used_mah=_parse_number(record, 'capacityUsedMah') or 0,
            is_completed=True,
        )

    @property
    def state(self) -> FlightState:
        if self.is_completed:
            return FlightState.COMPLETED
        if self.flight_segment_start_time is not None:
            return FlightState.SEGMENT_OPEN
        if self.is_started():
            return FlightState.SEGMENT_CLOSED
        return FlightState.UNSTARTED

    def is_started(self) -> bool:
        return self.flight_start_time is not None and self.flight_start_time >= 0

    def start_flight(self, now: int | None = None):
        """
        Start the flight without opening a segment.

        Raises:
            FlightStateError: If the flight is completed or already started
        """
        if self.is_completed:
            raise FlightStateError("Cannot start flight. Flight is already completed.")
        if self.flight_start_time is not None:
            raise FlightStateError("Cannot start flight. Flight has already been started.")

        self.flight_start_time = _now() if now is None else now

    def start_segment(self, now: int | None = None):
        """
        Open a new segment, starting the flight as well if needed.

        Raises:
            FlightStateError: If the flight is completed or a segment is open
        """
        if self.is_completed:
            raise FlightStateError("Cannot start segment. Flight is already completed.")
        if self.flight_segment_start_time is not None:
            raise FlightStateError("Cannot start segment. Flight segment has already been started.")

        now = _now() if now is None else now
        if self.flight_start_time is None:
            self.flight_start_time = now
        self.flight_segment_start_time = now

    def finish_segment(self, now: int | None = None):
        """
        Close the open segment and add its length to the flight duration.

        Raises:
            FlightStateError: If the flight is completed or no segment is open
        """
        if self.is_completed:
            raise FlightStateError("Cannot finish segment. Flight is already completed.")
        if self.flight_segment_start_time is None:
            raise FlightStateError("Cannot finish segment. Flight segment has not been started.")

        now = _now() if now is None else now
        # Clock skew is not guarded against; a negative delta is added as is.
        self.flight_duration_seconds += now - self.flight_segment_start_time
        self.flight_segment_start_time = None

    def finish_flight(self, capacity_used_mah: float | None = None, now: int | None = None):
        """
        Complete the flight.

        An open segment is closed at ``now`` first. After this call the
        flight can no longer be changed.

        Args:
            capacity_used_mah: Battery capacity used, defaults to 0
            now: Current time (UNIX timestamp), defaults to the wall clock

        Raises:
            FlightStateError: If the flight is already completed
        """
        if self.is_completed:
            raise FlightStateError("Cannot finish flight. Flight is already completed.")

        now = _now() if now is None else now
        if self.flight_segment_start_time is not None:
            self.finish_segment(now)

        self.capacity_used_mah = capacity_used_mah or 0
        self.is_completed = True

    def assign_index(self, flight_index: int):
        """
        Set the flight index if it has not been set yet.

        Allowed on completed flights, since the index is assigned when the
        flight is appended to the log.

        Raises:
            FlightStateError: If the flight already has an index
        """
        if self.flight_index is not None:
            raise FlightStateError(f"Flight already has index {self.flight_index}.")
        object.__setattr__(self, 'flight_index', flight_index)

    def to_record(self) -> dict:
        """
        Convert the completed flight to a flat record.

        Raises:
            FlightStateError: If the flight is not completed
        """
        if not self.is_completed:
            raise FlightStateError("Cannot convert flight to record. Flight is not completed.")

        return {
            'modelId': self.model_id,
            'flightIndex': self.flight_index,
            'flightStartTime': self.flight_start_time,
            'flightDurationSeconds': self.flight_duration_seconds,
            'batteryId': self.battery_id,
            'capacityUsedMah': self.capacity_used_mah,
        }

    def __repr__(self):
        return (
            f"<Flight(model_id={self.model_id}, flight_index={self.flight_index}, "
            f"state={self.state.value})>"
        )

    def __str__(self):
        return (
            f"Flight(modelId={self.model_id}, "
            f"flightIndex={self.flight_index}, "
            f"flightStartTime={_format_time(self.flight_start_time)}, "
            f"flightSegmentStartTime={_format_time(self.flight_segment_start_time)}, "
            f"flightDuration={self.flight_duration_seconds} s, "
            f"batteryId={self.battery_id if self.battery_id is not None else -1}, "
            f"capacityUsedMah={self.capacity_used_mah} mAh, "
            f"isCompleted={self.is_completed})"
        )


class Aircraft:
    """Running totals for one aircraft model."""

    def __init__(
        self,
        model_id: int = -1,
        number_of_flights: int = 0,
        total_flight_duration_seconds: float = 0,
        total_capacity_used_mah: float = 0,
    ):
        self.model_id = model_id
        self.number_of_flights = number_of_flights
        self.total_flight_duration_seconds = total_flight_duration_seconds
        self.total_capacity_used_mah = total_capacity_used_mah

    @classmethod
    def from_record(cls, record: dict) -> 'Aircraft':
        model_id = _parse_number(record, 'modelId')
        return cls(
            model_id=-1 if model_id is None else model_id,
            number_of_flights=_parse_number(record, 'numberOfFlights') or 0,
            total_flight_duration_seconds=_parse_number(record, 'flightDurationSeconds') or 0,
            total_capacity_used_mah=_parse_number(record, 'capacityUsedMah') or 0,
        )

    def increment_flight_count(self):
        self.number_of_flights += 1

    def add_flight_duration(self, seconds: float):
        self.total_flight_duration_seconds += seconds

    def add_capacity_used(self, capacity_used_mah: float):
        self.total_capacity_used_mah += capacity_used_mah

    def to_record(self) -> dict:
        return {
            'modelId': self.model_id,
            'numberOfFlights': self.number_of_flights,
            'flightDurationSeconds': self.total_flight_duration_seconds,
            'capacityUsedMah': self.total_capacity_used_mah,
        }

    def __repr__(self):
        return (
            f"<Aircraft(model_id={self.model_id}, flights={self.number_of_flights}, "
            f"duration={self.total_flight_duration_seconds} s)>"
        )
