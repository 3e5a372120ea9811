"""Exception types raised by the flight log."""


class FlightLogError(Exception):
    """Base class for all flight log errors."""


class FlightStateError(FlightLogError, ValueError):
    """A flight operation was called out of sequence."""


class SchemaError(FlightLogError, ValueError):
    """A table header does not match the expected columns."""


class StorageError(FlightLogError, OSError):
    """A table file could not be opened."""
