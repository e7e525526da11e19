from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

ALL = "All"


@dataclass(frozen=True)
class ChartLimits:
    genres: int = 8
    presenters: int = 8
    origins: int = 8
    presenter_label: int = 8
    origin_label: int = 12


@dataclass(frozen=True)
class FilterState:
    season: str = ALL
    presenter: str = ALL
    search_text: str = ""
    limits: ChartLimits = field(default_factory=ChartLimits)


def _as_choice(value: object) -> str:
    if value is None:
        return ALL
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    s = str(value)
    return s if s else ALL


def _as_limit(value: object, default: int, *, upper: int = 50) -> int:
    try:
        n = int(value)  # type: ignore[arg-type]
    except Exception:
        n = default
    return max(1, min(upper, n))


def normalize_filters(raw: Optional[dict]) -> FilterState:
    raw = raw or {}

    search_text = raw.get("search_text")
    search_text = "" if search_text is None else str(search_text)

    lim = raw.get("limits") or {}
    defaults = ChartLimits()
    limits = ChartLimits(
        genres=_as_limit(lim.get("genres", defaults.genres), defaults.genres),
        presenters=_as_limit(lim.get("presenters", defaults.presenters), defaults.presenters),
        origins=_as_limit(lim.get("origins", defaults.origins), defaults.origins),
        presenter_label=_as_limit(lim.get("presenter_label", defaults.presenter_label), defaults.presenter_label, upper=80),
        origin_label=_as_limit(lim.get("origin_label", defaults.origin_label), defaults.origin_label, upper=80),
    )

    return FilterState(
        season=_as_choice(raw.get("season")),
        presenter=_as_choice(raw.get("presenter")),
        search_text=search_text,
        limits=limits,
    )
