from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

from movieclub.charts import to_vega_spec, truncate_label
from movieclub.data import UNKNOWN_ORIGIN, frame_to_records
from movieclub.filters import FilterState

PIE_COLORS = ["#8884d8", "#82ca9d", "#ffc658", "#ff7300", "#8dd1e1", "#d084d0", "#ffb347", "#87ceeb"]


def _rank_counts(labels: pd.Series, label_col: str, top_n: Optional[int]) -> pd.DataFrame:
    """Count labels, highest first; equal counts keep first-seen order."""
    if labels.empty:
        return pd.DataFrame(columns=[label_col, "count"])
    counts = labels.groupby(labels, sort=False).size().sort_values(ascending=False, kind="stable")
    if top_n is not None:
        counts = counts.head(top_n)
    out = counts.rename_axis(label_col).reset_index(name="count")
    out["count"] = out["count"].astype(int)
    return out


def group_by_genre(movies: pd.DataFrame, top_n: Optional[int] = None) -> pd.DataFrame:
    if movies.empty:
        return pd.DataFrame(columns=["genre", "count"])
    # A movie tagged "Drama, Comedy" counts once for each genre.
    tokens = movies["genre"].dropna().astype(str).str.split(",").explode().str.strip().reset_index(drop=True)
    tokens = tokens[tokens.notna() & (tokens != "")]
    return _rank_counts(tokens, "genre", top_n)


def group_by_origin(movies: pd.DataFrame, top_n: Optional[int] = None) -> pd.DataFrame:
    if movies.empty:
        return pd.DataFrame(columns=["origin", "count"])
    origin = movies["origin"]
    present = origin.notna() & (origin.astype(str) != "")
    labels = origin.where(present, UNKNOWN_ORIGIN).astype(str)
    return _rank_counts(labels.reset_index(drop=True), "origin", top_n)


def group_by_presenter(movies: pd.DataFrame, top_n: Optional[int] = None) -> pd.DataFrame:
    columns = ["presenter", "movies", "duration"]
    if movies.empty:
        return pd.DataFrame(columns=columns)
    df = movies[movies["presented_by"].astype(str) != ""]
    if df.empty:
        return pd.DataFrame(columns=columns)
    # Alphabetical grouping first so that the stable sort breaks ties by name.
    grouped = (
        df.groupby("presented_by", sort=True)
        .agg(movies=("title", "size"), duration=("duration_minutes", "sum"))
        .reset_index()
        .rename(columns={"presented_by": "presenter"})
        .astype({"movies": int, "duration": int})
        .sort_values("movies", ascending=False, kind="stable")
    )
    if top_n is not None:
        grouped = grouped.head(top_n)
    return grouped[columns].reset_index(drop=True)


def compute_breakdowns(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered_movies", pd.DataFrame())
    limits = filters.limits

    genres = group_by_genre(filtered, top_n=limits.genres)
    origins = group_by_origin(filtered)
    top_origins = origins.head(limits.origins).copy()
    top_origins["label"] = top_origins["origin"].apply(lambda s: truncate_label(str(s), limits.origin_label, ellipsis="..."))
    presenters = group_by_presenter(filtered, top_n=limits.presenters)
    presenters["label"] = presenters["presenter"].apply(lambda s: truncate_label(str(s), limits.presenter_label))

    charts: Dict[str, Any] = {}
    if not genres.empty:
        pie = (
            alt.Chart(genres)
            .mark_arc(outerRadius=80)
            .encode(
                theta=alt.Theta("count:Q", stack=True),
                color=alt.Color("genre:N", title="Genre", sort=None, scale=alt.Scale(range=PIE_COLORS)),
                tooltip=[alt.Tooltip("genre:N", title="Genre"), alt.Tooltip("count:Q", title="Movies")],
            )
            .properties(height=250)
        )
        charts["genre_distribution"] = to_vega_spec(pie)

    if not top_origins.empty:
        bar = (
            alt.Chart(top_origins)
            .mark_bar(color="#10b981", cornerRadiusEnd=4)
            .encode(
                x=alt.X("count:Q", title="Movies"),
                y=alt.Y("label:N", title=None, sort=None),
                tooltip=[alt.Tooltip("origin:N", title="Origin"), alt.Tooltip("count:Q", title="Movies")],
            )
            .properties(height=250)
        )
        charts["movies_by_origin"] = to_vega_spec(bar)

    if not presenters.empty:
        bar = (
            alt.Chart(presenters)
            .mark_bar(color="#f59e0b", cornerRadiusEnd=4)
            .encode(
                x=alt.X("label:N", title=None, sort=None, axis=alt.Axis(labelAngle=-45)),
                y=alt.Y("movies:Q", title="Movies Presented"),
                tooltip=[
                    alt.Tooltip("presenter:N", title="Presenter"),
                    alt.Tooltip("movies:Q", title="Movies"),
                    alt.Tooltip("duration:Q", title="Minutes", format=","),
                ],
            )
            .properties(height=250)
        )
        charts["top_presenters"] = to_vega_spec(bar)

    return {
        "filters": asdict(filters),
        "genres": frame_to_records(genres),
        "origins": frame_to_records(origins),
        "top_origins": frame_to_records(top_origins),
        "presenters": frame_to_records(presenters),
        "charts": charts,
    }
