from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from movieclub.data import frame_to_records
from movieclub.filters import FilterState

TABLE_COLUMNS = [
    "season",
    "title",
    "presented_by",
    "release_year",
    "duration_minutes",
    "primary_genre",
    "director",
    "origin",
    "rating_percent",
]


def _primary_genre(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    first = value.split(",")[0].strip()
    return first or None


def movie_table(movies: pd.DataFrame) -> pd.DataFrame:
    if movies.empty:
        return pd.DataFrame(columns=TABLE_COLUMNS)
    table = movies.assign(primary_genre=movies["genre"].apply(_primary_genre))
    return table[TABLE_COLUMNS].reset_index(drop=True)


def compute_movies(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered: pd.DataFrame = ctx.get("filtered_movies", pd.DataFrame())
    table = movie_table(filtered)
    return {"filters": asdict(filters), "count": int(len(table)), "rows": frame_to_records(table)}
