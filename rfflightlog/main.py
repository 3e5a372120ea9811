"""Main entry point for the RC flight log."""

import argparse
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from config import get_file_paths
from rfflightlog.errors import FlightLogError
from rfflightlog.models import Flight
from rfflightlog.repository import FlightRepository


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='RC Flight Log - Record flights and per-aircraft totals'
    )

    parser.add_argument(
        '--model-id',
        type=int,
        help='Aircraft model ID. Filters --list, required for --log-flight.'
    )
    parser.add_argument(
        '--log-flight',
        action='store_true',
        help='Record a completed flight for --model-id'
    )
    parser.add_argument(
        '--duration',
        type=int,
        help='Airborne time of the flight in seconds (with --log-flight)'
    )
    parser.add_argument(
        '--capacity',
        type=int,
        default=0,
        help='Battery capacity used in mAh (with --log-flight)'
    )
    parser.add_argument(
        '--start-time',
        type=int,
        help='Flight start as a UNIX timestamp (defaults to now minus --duration)'
    )
    parser.add_argument(
        '--battery-id',
        type=int,
        help='Battery ID (not written to the flights table)'
    )
    parser.add_argument(
        '--flight-index',
        type=int,
        help='Flight index (defaults to the next index for the model)'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List logged flights'
    )
    parser.add_argument(
        '--last',
        action='store_true',
        help='Show the most recently logged flight'
    )
    parser.add_argument(
        '--summary',
        action='store_true',
        help='Show flight totals per aircraft'
    )
    parser.add_argument(
        '--flights-file',
        type=str,
        help='Flights table path (overrides FLIGHTS_CSV)'
    )
    parser.add_argument(
        '--aircraft-file',
        type=str,
        help='Aircraft table path (overrides AIRCRAFT_CSV)'
    )

    return parser.parse_args(argv)


def format_duration(seconds) -> str:
    """
    Format a number of seconds as H:MM:SS.

    Examples:
        3600 -> '1:00:00'
        75 -> '0:01:15'
    """
    seconds = int(seconds)
    sign = '-' if seconds < 0 else ''
    minutes, secs = divmod(abs(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{sign}{hours}:{minutes:02d}:{secs:02d}"


def format_flight(flight: Flight) -> str:
    if flight.flight_start_time is not None:
        started = datetime.fromtimestamp(flight.flight_start_time, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
    else:
        started = '-'
    return (
        f"model {flight.model_id} #{flight.flight_index}: {started} UTC, "
        f"{format_duration(flight.flight_duration_seconds)}, {flight.capacity_used_mah} mAh"
    )


def log_flight(
    repository: FlightRepository,
    model_id: int,
    duration: int,
    capacity: int = 0,
    start_time: int | None = None,
    battery_id: int | None = None,
    flight_index: int | None = None,
) -> Flight:
    """
    Record a single-segment flight.

    Args:
        repository: Repository to append to
        model_id: Aircraft model ID
        duration: Airborne time in seconds
        capacity: Battery capacity used in mAh
        start_time: UNIX timestamp of the segment start (defaults to now - duration)
        battery_id: Optional battery ID
        flight_index: Optional flight index; assigned from the log if omitted

    Returns:
        Flight: The appended flight
    """
    if start_time is None:
        start_time = int(time.time()) - duration

    flight = Flight(flight_index=flight_index, model_id=model_id, battery_id=battery_id)
    flight.start_segment(start_time)
    flight.finish_flight(capacity, start_time + duration)

    if flight_index is None:
        # Continue the index sequence of the flights already on file.
        if Path(repository.flights_path).exists():
            repository.load_flights(model_id)

    repository.append_flight(flight)
    return flight


def list_flights(repository: FlightRepository, model_id: int | None = None):
    """Print logged flights, optionally for one model only."""
    if not Path(repository.flights_path).exists():
        print("No flights logged yet", file=sys.stderr)
        return

    repository.load_flights(model_id)
    for flight in repository.flights:
        print(format_flight(flight))
    print(f"{repository.get_number_of_flights(model_id)} flight(s)", file=sys.stderr)


def show_last_flight(repository: FlightRepository):
    flight = repository.get_last_flight()
    if flight is None:
        print("No flights logged yet", file=sys.stderr)
        return
    print(format_flight(flight))


def show_summary(repository: FlightRepository):
    """Print the totals of every aircraft."""
    if not repository.aircraft:
        print("No aircraft logged yet", file=sys.stderr)
        return

    for aircraft in repository.aircraft:
        print(
            f"model {aircraft.model_id}: {aircraft.number_of_flights} flight(s), "
            f"{format_duration(aircraft.total_flight_duration_seconds)}, "
            f"{aircraft.total_capacity_used_mah} mAh"
        )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    flights_path, aircraft_path = get_file_paths()
    flights_path = args.flights_file or flights_path
    aircraft_path = args.aircraft_file or aircraft_path

    if not (args.log_flight or args.list or args.last or args.summary):
        print("Error: Must specify --log-flight, --list, --last or --summary", file=sys.stderr)
        sys.exit(1)

    if args.log_flight and (args.model_id is None or args.duration is None):
        print("Error: --log-flight requires --model-id and --duration", file=sys.stderr)
        sys.exit(1)

    try:
        repository = FlightRepository(flights_path, aircraft_path)

        if args.log_flight:
            flight = log_flight(
                repository,
                model_id=args.model_id,
                duration=args.duration,
                capacity=args.capacity,
                start_time=args.start_time,
                battery_id=args.battery_id,
                flight_index=args.flight_index,
            )
            print(f"Logged flight to {flights_path}", file=sys.stderr)
            print(format_flight(flight))

        if args.list:
            list_flights(repository, args.model_id)

        if args.last:
            show_last_flight(repository)

        if args.summary:
            show_summary(repository)
    except FlightLogError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
