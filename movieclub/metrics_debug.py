from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from movieclub.data import PRESENTER_ALIASES, frame_to_records
from movieclub.filters import FilterState


def compute_debug(filters: FilterState, ctx: Dict[str, Any]) -> Dict[str, Any]:
    movies: pd.DataFrame = ctx.get("movies", pd.DataFrame()).copy()
    filtered: pd.DataFrame = ctx.get("filtered_movies", pd.DataFrame())
    payload: Dict[str, Any] = {
        "filters": asdict(filters),
        "files": list(ctx.get("files", []) or []),
        "row_counts": {"movies": int(len(movies)), "filtered_movies": int(len(filtered))},
        "cleaning_checks": {},
        "presenter_aliases": [],
        "unmapped_presenters": [],
    }
    if movies.empty:
        return payload

    payload["cleaning_checks"] = {
        "missing_title": int((movies["title"] == "").sum()),
        "missing_season": int((movies["season"] == "").sum()),
        "missing_presenter": int((movies["presented_by"] == "").sum()),
        "zero_duration": int((movies["duration_minutes"] == 0).sum()),
        "missing_rating": int(movies["rating_percent"].isna().sum()),
        "missing_origin": int(movies["origin"].isna().sum()),
    }

    rewritten = movies[movies["presented_by_raw"] != movies["presented_by"]]
    rewritten = rewritten[rewritten["presented_by_raw"] != ""]
    if not rewritten.empty:
        aliases = (
            rewritten.groupby(["presented_by_raw", "presented_by"], sort=True)
            .size()
            .reset_index(name="count")
            .rename(columns={"presented_by_raw": "raw", "presented_by": "canonical"})
        )
        payload["presenter_aliases"] = frame_to_records(aliases)

    # Labels the table left alone and that are not canonical names themselves.
    canonical = set(PRESENTER_ALIASES.values())
    passthrough = movies[(movies["presented_by"] != "") & ~movies["presented_by"].isin(canonical)]
    if not passthrough.empty:
        unmapped_top = (
            passthrough.groupby("presented_by", sort=True)
            .size()
            .sort_values(ascending=False, kind="stable")
            .head(20)
            .reset_index(name="count")
            .rename(columns={"presented_by": "presenter"})
        )
        payload["unmapped_presenters"] = frame_to_records(unmapped_top)
    return payload
