import marimo

__generated_with = "0.19.11"
app = marimo.App(width="medium")


@app.cell
def _():
    import marimo as mo
    return (mo,)


@app.cell
def _(mo):
    mo.md(
        r"""
        # RC Flight Analysis

        Flights and per-aircraft totals from the flight log tables.
        """
    )
    return


@app.cell
def _():
    import os
    import pandas as pd
    import plotly.express as px
    return os, pd, px


@app.cell
def _(os):
    FLIGHTS_CSV = os.getenv("FLIGHTS_CSV", "flights.csv")
    AIRCRAFT_CSV = os.getenv("AIRCRAFT_CSV", "aircraft.csv")
    return AIRCRAFT_CSV, FLIGHTS_CSV


@app.cell
def _(mo):
    mo.md(r"## Load Flight Data")
    return


@app.cell
def _(FLIGHTS_CSV, pd):
    flights_df = pd.read_csv(FLIGHTS_CSV)
    flights_df["start_time"] = pd.to_datetime(flights_df["flightStartTime"], unit="s", utc=True)
    flights_df["date"] = flights_df["start_time"].dt.date
    flights_df["duration_minutes"] = flights_df["flightDurationSeconds"] / 60
    flights_df
    return (flights_df,)


@app.cell
def _(AIRCRAFT_CSV, pd):
    aircraft_df = pd.read_csv(AIRCRAFT_CSV)
    aircraft_df["hours"] = aircraft_df["flightDurationSeconds"] / 3600
    aircraft_df
    return (aircraft_df,)


@app.cell
def _(aircraft_df, flights_df, mo):
    mo.md(
        f"""
        ## Overview

        - **Total flights:** {len(flights_df):,}
        - **Date range:** {flights_df["date"].min()} to {flights_df["date"].max()}
        - **Aircraft:** {aircraft_df["modelId"].nunique()}
        - **Total airborne hours:** {aircraft_df["hours"].sum():.1f}
        """
    )
    return


@app.cell
def _(mo):
    mo.md(r"## Airborne Time Per Aircraft")
    return


@app.cell
def _(aircraft_df, px):
    fig_aircraft = px.bar(
        aircraft_df,
        x="modelId",
        y="hours",
        title="Airborne Time Per Aircraft",
        labels={"modelId": "Model", "hours": "Hours"},
    )
    fig_aircraft
    return


@app.cell
def _(mo):
    mo.md(r"## Flight Duration Distribution")
    return


@app.cell
def _(flights_df, px):
    fig_duration = px.histogram(
        flights_df,
        x="duration_minutes",
        color="modelId",
        nbins=50,
        title="Flight Duration Distribution",
        labels={"duration_minutes": "Duration (minutes)"},
    )
    fig_duration
    return


@app.cell
def _(mo):
    mo.md(r"## Capacity Used vs Duration")
    return


@app.cell
def _(flights_df, px):
    fig_capacity = px.scatter(
        flights_df,
        x="duration_minutes",
        y="capacityUsedMah",
        color="modelId",
        title="Capacity Used vs Flight Duration",
        labels={"duration_minutes": "Duration (minutes)", "capacityUsedMah": "Capacity (mAh)"},
    )
    fig_capacity
    return


if __name__ == "__main__":
    app.run()
