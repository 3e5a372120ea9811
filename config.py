"""Configuration management for the RC flight log."""

import os
from dotenv import load_dotenv

load_dotenv()

# Flight log files
FILE_CONFIG = {
    'flights': os.getenv('FLIGHTS_CSV', 'flights.csv'),
    'aircraft': os.getenv('AIRCRAFT_CSV', 'aircraft.csv'),
}

# Directory the export script writes Parquet files to
EXPORT_DIR = os.getenv('EXPORT_DIR', 'data')


def get_file_paths():
    """Return the (flights, aircraft) table paths from configuration."""
    return FILE_CONFIG['flights'], FILE_CONFIG['aircraft']
