from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import altair as alt
import pandas as pd

from movieclub.charts import to_vega_spec
from movieclub.data import frame_to_records, round_half_up
from movieclub.filters import FilterState


def group_by_season(movies: pd.DataFrame) -> pd.DataFrame:
    """Movie count, total and average minutes per season, ordered by season label."""
    columns = ["season", "movies", "duration", "avg_duration"]
    if movies.empty:
        return pd.DataFrame(columns=columns)
    df = movies[movies["season"].astype(str) != ""]
    if df.empty:
        return pd.DataFrame(columns=columns)
    grouped = (
        df.groupby("season", sort=True)
        .agg(movies=("title", "size"), duration=("duration_minutes", "sum"))
        .reset_index()
    )
    grouped["movies"] = grouped["movies"].astype(int)
    grouped["duration"] = grouped["duration"].astype(int)
    grouped["avg_duration"] = [
        (total / count) if count else 0.0 for total, count in zip(grouped["duration"], grouped["movies"])
    ]
    return grouped[columns]


def compute_seasons(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    # The trend always covers the full collection so it stays put while filters change.
    movies: pd.DataFrame = ctx.get("movies", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered_movies", pd.DataFrame())

    trend = group_by_season(movies)
    filtered_minutes = group_by_season(filtered)[["season", "duration"]]

    charts: Dict[str, Any] = {}
    if not trend.empty:
        src = trend.assign(
            label="S" + trend["season"].astype(str),
            avg_duration_disp=trend["avg_duration"].apply(round_half_up),
        )
        order = src["label"].tolist()
        base = alt.Chart(src).encode(x=alt.X("label:N", title="Season", sort=order))
        bars = base.mark_bar(color="#8b5cf6", cornerRadiusTopLeft=4, cornerRadiusTopRight=4).encode(
            y=alt.Y("movies:Q", title="Movies"),
            tooltip=[alt.Tooltip("label:N", title="Season"), alt.Tooltip("movies:Q", title="Movies")],
        )
        line = base.mark_line(color="#06b6d4", strokeWidth=3, point=True).encode(
            y=alt.Y("avg_duration_disp:Q", title="Avg Duration (min)"),
            tooltip=[
                alt.Tooltip("label:N", title="Season"),
                alt.Tooltip("avg_duration_disp:Q", title="Avg Duration (min)"),
                alt.Tooltip("duration:Q", title="Total Minutes", format=","),
            ],
        )
        charts["season_trend"] = to_vega_spec(alt.layer(bars, line).resolve_scale(y="independent").properties(height=250))

    if not filtered_minutes.empty:
        minutes_bar = (
            alt.Chart(filtered_minutes)
            .mark_bar(color="#82ca9d")
            .encode(
                x=alt.X("season:N", title="Season", sort=None),
                y=alt.Y("duration:Q", title="Minutes"),
                tooltip=[alt.Tooltip("season:N", title="Season"), alt.Tooltip("duration:Q", title="Minutes", format=",")],
            )
            .properties(height=250)
        )
        charts["minutes_by_season"] = to_vega_spec(minutes_bar)

    return {
        "filters": asdict(filters),
        "trend": frame_to_records(trend),
        "filtered_minutes": frame_to_records(filtered_minutes),
        "charts": charts,
    }
