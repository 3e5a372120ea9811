"""Export the flight log and aircraft totals to Parquet files."""

from pathlib import Path

import pandas as pd

from config import EXPORT_DIR, get_file_paths

DATA_DIR = Path(EXPORT_DIR)


def recompute_aircraft_totals(flights_df: pd.DataFrame) -> pd.DataFrame:
    """
    Rebuild per-aircraft totals from the flights log alone.

    The aircraft table is updated after each flight row is appended, so the
    two can drift apart after an interrupted write. Comparing this frame with
    the aircraft table shows any such drift.
    """
    return (
        flights_df.groupby("modelId")
        .agg(
            numberOfFlights=("flightIndex", "size"),
            flightDurationSeconds=("flightDurationSeconds", "sum"),
            capacityUsedMah=("capacityUsedMah", "sum"),
        )
        .reset_index()
    )


def export():
    DATA_DIR.mkdir(exist_ok=True)
    flights_path, aircraft_path = get_file_paths()

    flights_df = pd.read_csv(flights_path)
    flights_df["flightStartTime"] = pd.to_datetime(flights_df["flightStartTime"], unit="s", utc=True)
    flights_df.to_parquet(DATA_DIR / "flights.parquet", index=False)
    print(f"Exported {len(flights_df)} flights")

    aircraft_df = pd.read_csv(aircraft_path)
    aircraft_df.to_parquet(DATA_DIR / "aircraft.parquet", index=False)
    print(f"Exported {len(aircraft_df)} aircraft")

    recomputed_df = recompute_aircraft_totals(flights_df)
    merged = aircraft_df.merge(recomputed_df, on="modelId", how="outer", suffixes=("", "_log"))
    drift = merged[
        (merged["numberOfFlights"] != merged["numberOfFlights_log"])
        | (merged["flightDurationSeconds"] != merged["flightDurationSeconds_log"])
        | (merged["capacityUsedMah"] != merged["capacityUsedMah_log"])
    ]
    if not drift.empty:
        print(f"Warning: aircraft totals differ from the flights log for model(s) "
              f"{', '.join(str(m) for m in drift['modelId'])}")


if __name__ == "__main__":
    export()
