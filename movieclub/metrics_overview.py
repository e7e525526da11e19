from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import pandas as pd

from movieclub.data import round_half_up
from movieclub.filters import FilterState


@dataclass(frozen=True)
class AggregateSummary:
    total_movies: int = 0
    total_minutes: int = 0
    unique_origin_count: int = 0
    unique_presenter_count: int = 0
    average_rating_percent: float = 0.0

    @property
    def watch_hours(self) -> int:
        return int(round_half_up(self.total_minutes / 60) or 0)


def _count_distinct(series: pd.Series) -> int:
    values = series.dropna().astype(str)
    return int(values[values != ""].nunique())


def compute_summary(movies: pd.DataFrame) -> AggregateSummary:
    if movies.empty:
        return AggregateSummary()
    # Unrated movies stay out of the denominator.
    ratings = pd.to_numeric(movies["rating_percent"], errors="coerce").dropna()
    return AggregateSummary(
        total_movies=int(len(movies)),
        total_minutes=int(movies["duration_minutes"].sum()),
        unique_origin_count=_count_distinct(movies["origin"]),
        unique_presenter_count=_count_distinct(movies["presented_by"]),
        average_rating_percent=float(ratings.mean()) if not ratings.empty else 0.0,
    )


def compute_overview(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered_movies", pd.DataFrame())
    movies: pd.DataFrame = ctx.get("movies", pd.DataFrame())

    summary = compute_summary(filtered)
    return {
        "filters": asdict(filters),
        "kpis": {
            **asdict(summary),
            "watch_hours": summary.watch_hours,
            "average_rating_display": round_half_up(summary.average_rating_percent, 1),
        },
        "collection_size": int(len(movies)),
        "controls": {
            "seasons": list(ctx.get("seasons", []) or []),
            "presenters": list(ctx.get("presenters", []) or []),
        },
    }
