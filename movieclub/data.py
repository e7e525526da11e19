from __future__ import annotations

import logging
import math
import numbers
import re
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from movieclub.filters import ALL, FilterState, normalize_filters


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
FILE_GLOB = "movies.*"
# Earlier suffixes win when several source files sit side by side.
SUPPORTED_SUFFIXES = (".json", ".csv", ".xlsx")

MOVIE_COLUMNS = {
    "Title": "title",
    "Season": "season",
    "Presented by": "presented_by",
    "Duration (min)": "duration_minutes",
    "Genre": "genre",
    "Origin": "origin",
    "Release Year": "release_year",
    "Director": "director",
    "RottenTomatoes Rating": "rating_percent",
}

NORMALIZED_COLUMNS = [
    "title",
    "season",
    "presented_by",
    "presented_by_raw",
    "duration_minutes",
    "genre",
    "origin",
    "release_year",
    "director",
    "rating_percent",
]

NO_PRESENTER = "No-One"
UNKNOWN_ORIGIN = "Unknown"

PRESENTER_ALIASES: Dict[str, str] = {
    "E.": "Eleonore",
    "E": "Eleonore",
    "Diego": "Diego K.",
    "Dieg K": "Diego K.",
    "Diego K": "Diego K.",
    "Dieg K.": "Diego K.",
    "Diego K.": "Diego K.",
    "Ketels": "Diego K.",
    "Cha": "Chachacha",
    "Cha-cha-cha": "Chachacha",
    "Chacha": "Chachacha",
    "chachacha": "Chachacha",
    "Juanita": "Juan",
    "Bonus": "HS",
    "Bonus HS": "HS",
    "again": NO_PRESENTER,
    "null": NO_PRESENTER,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


# ---------------- Field parsing ----------------
def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def scalar_text(value: object) -> str:
    """Render a scalar as text, dropping the ``.0`` spreadsheets add to whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def optional_text(value: object) -> Optional[str]:
    if is_missing(value):
        return None
    s = scalar_text(value)
    return s if s else None


def canonicalize_presenter(raw: object) -> str:
    """Map a presenter label to its canonical name.

    The lookup is exact and case-sensitive; labels outside the table are
    returned unchanged. A missing label becomes an empty string.
    """
    if is_missing(raw):
        return ""
    name = scalar_text(raw)
    return PRESENTER_ALIASES.get(name, name)


def coerce_season(raw: object) -> str:
    if is_missing(raw):
        return ""
    return scalar_text(raw)


def parse_duration(raw: object) -> int:
    """Parse minutes from ``120``, ``"120"`` or ``"120 min"``; anything else is 0."""
    if isinstance(raw, bool) or is_missing(raw):
        return 0
    if isinstance(raw, numbers.Real):
        value = float(raw)
        if not math.isfinite(value):
            return 0
        minutes = int(value)
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return 0
        minutes = int(match.group(1))
    return max(0, minutes)


def parse_rating(raw: object) -> Optional[float]:
    """Parse a percentage such as ``"87%"``; None when absent or unparseable."""
    if isinstance(raw, bool) or is_missing(raw):
        return None
    if isinstance(raw, numbers.Real):
        value = float(raw)
    else:
        match = _LEADING_FLOAT.match(str(raw).split("%", 1)[0])
        if not match:
            return None
        value = float(match.group(1))
    return value if math.isfinite(value) else None


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


# ---------------- Normalization ----------------
def normalize_movie(record: Mapping[str, Any]) -> Dict[str, Any]:
    raw_presenter = record.get("Presented by")
    title = record.get("Title")
    return {
        "title": "" if is_missing(title) else scalar_text(title),
        "season": coerce_season(record.get("Season")),
        "presented_by": canonicalize_presenter(raw_presenter),
        "presented_by_raw": "" if is_missing(raw_presenter) else scalar_text(raw_presenter),
        "duration_minutes": parse_duration(record.get("Duration (min)")),
        "genre": optional_text(record.get("Genre")),
        "origin": optional_text(record.get("Origin")),
        "release_year": optional_text(record.get("Release Year")),
        "director": optional_text(record.get("Director")),
        "rating_percent": parse_rating(record.get("RottenTomatoes Rating")),
    }


def normalize_movies(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    rows = [normalize_movie(r) for r in records if isinstance(r, Mapping)]
    df = pd.DataFrame(rows, columns=NORMALIZED_COLUMNS)
    df["duration_minutes"] = df["duration_minutes"].astype("int64")
    df["rating_percent"] = pd.to_numeric(df["rating_percent"], errors="coerce").astype("float64")
    for col in ["title", "season", "presented_by", "presented_by_raw"]:
        df[col] = df[col].astype(object)
    return df


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Rows as plain dicts with NaN turned into None."""
    if df.empty:
        return []
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


# ---------------- Loaders ----------------
def get_source_file(data_dir: Path = DATA_DIR) -> Optional[Path]:
    candidates = [p for p in data_dir.glob(FILE_GLOB) if p.suffix.lower() in SUPPORTED_SUFFIXES]
    if not candidates:
        return None
    return sorted(candidates, key=lambda p: SUPPORTED_SUFFIXES.index(p.suffix.lower()))[0]


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def load_movie_records(path: Path) -> List[Dict[str, Any]]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    elif suffix == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif suffix == ".xlsx":
        df = pd.read_excel(path, dtype=object)
    else:
        raise ValueError(f"Unsupported movie data file: {path.name}")
    df = df.loc[:, ~df.columns.duplicated()]
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in MOVIE_COLUMNS if c not in df.columns]
    if missing and not df.empty:
        logger.warning("%s lacks columns %s; those fields load as empty", path.name, missing)
    return df.to_dict(orient="records")


def list_seasons(movies: pd.DataFrame) -> List[str]:
    if movies.empty:
        return []
    return sorted({s for s in movies["season"] if s})


def list_presenters(movies: pd.DataFrame) -> List[str]:
    if movies.empty:
        return []
    return sorted({p for p in movies["presented_by"] if p})


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    frames: List[pd.DataFrame] = []
    for name, _ in files_sig:
        path = Path(name)
        frames.append(normalize_movies(load_movie_records(path)))
        logger.info("Loaded %d movies from %s", len(frames[-1]), path.name)
    movies = pd.concat(frames, ignore_index=True) if frames else normalize_movies([])
    return {
        "files": [Path(name).name for name, _ in files_sig],
        "movies": movies,
        "seasons": list_seasons(movies),
        "presenters": list_presenters(movies),
    }


def load_dashboard_data(path: Optional[Path] = None) -> Dict[str, object]:
    source = Path(path) if path is not None else get_source_file()
    if source is None or not source.exists():
        logger.warning("No movie data found (looked for %s in %s)", FILE_GLOB, DATA_DIR if path is None else path)
        return {"files": [], "movies": normalize_movies([]), "seasons": [], "presenters": []}
    return _load_dashboard_data_cached(file_signature([source]))


def apply_filters(movies: pd.DataFrame, filters: FilterState) -> pd.DataFrame:
    if movies.empty:
        return movies.copy()
    mask = pd.Series(True, index=movies.index)
    if filters.season != ALL:
        mask &= movies["season"] == filters.season
    if filters.presenter != ALL:
        mask &= movies["presented_by"] == filters.presenter
    if filters.search_text:
        q = filters.search_text.lower()
        mask &= movies["title"].astype(str).str.lower().str.contains(q, regex=False, na=False)
    return movies[mask].copy()


def prepare_context(filters: dict | FilterState, data_ctx: Dict[str, object]) -> Dict[str, object]:
    movies: pd.DataFrame = data_ctx.get("movies")  # type: ignore[assignment]
    if movies is None:
        movies = normalize_movies([])
    movies = movies.copy()

    filt = filters if isinstance(filters, FilterState) else normalize_filters(filters)
    filtered_movies = apply_filters(movies, filt)

    return {
        "filters": filt,
        "files": data_ctx.get("files", []),
        "movies": movies,
        "filtered_movies": filtered_movies,
        "seasons": data_ctx.get("seasons") or list_seasons(movies),
        "presenters": data_ctx.get("presenters") or list_presenters(movies),
    }
