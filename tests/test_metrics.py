"""Tests for the summary and grouping aggregates."""

import pytest

from movieclub.data import apply_filters, normalize_movies
from movieclub.filters import FilterState
from movieclub.metrics_breakdowns import group_by_genre, group_by_origin, group_by_presenter
from movieclub.metrics_overview import AggregateSummary, compute_summary
from movieclub.metrics_seasons import group_by_season


def _pairs(df, label, metric):
    return list(zip(df[label].tolist(), df[metric].tolist()))


class TestSummary:
    """AggregateSummary over a record collection."""

    def test_empty_collection(self):
        summary = compute_summary(normalize_movies([]))
        assert summary == AggregateSummary()
        assert summary.total_movies == 0
        assert summary.total_minutes == 0
        assert summary.average_rating_percent == 0
        assert summary.watch_hours == 0

    def test_club_summary(self, club_movies):
        summary = compute_summary(club_movies)
        assert summary.total_movies == 6
        assert summary.total_minutes == 161 + 122 + 145
        assert summary.unique_origin_count == 4
        assert summary.unique_presenter_count == 4
        assert summary.watch_hours == 7

    def test_average_rating_skips_unrated(self, club_movies):
        summary = compute_summary(club_movies)
        assert summary.average_rating_percent == pytest.approx((100 + 89 + 99 + 88.5) / 4)

    def test_no_ratings_is_zero(self, two_movies):
        assert compute_summary(normalize_movies(two_movies)).average_rating_percent == 0.0


class TestGenreGrouping:
    def test_multi_label_counts(self, two_movies):
        genres = group_by_genre(normalize_movies(two_movies))
        assert _pairs(genres, "genre", "count") == [("Drama", 2), ("Comedy", 1)]

    def test_tokens_trimmed_and_empty_skipped(self, club_movies):
        genres = group_by_genre(club_movies)
        assert _pairs(genres, "genre", "count") == [
            ("Drama", 3),
            ("Romance", 2),
            ("Sci-Fi", 1),
            ("Comedy", 1),
            ("Thriller", 1),
        ]

    def test_top_n_keeps_first_seen_on_ties(self, club_movies):
        genres = group_by_genre(club_movies, top_n=3)
        assert genres["genre"].tolist() == ["Drama", "Romance", "Sci-Fi"]

    def test_empty(self):
        assert group_by_genre(normalize_movies([])).empty


class TestOriginGrouping:
    def test_missing_origin_is_unknown(self, club_movies):
        origins = group_by_origin(club_movies)
        assert _pairs(origins, "origin", "count") == [
            ("Unknown", 2),
            ("USSR", 1),
            ("France", 1),
            ("West Germany", 1),
            ("Hong Kong", 1),
        ]

    def test_no_cap_by_default(self, club_movies):
        assert len(group_by_origin(club_movies)) == 5
        assert len(group_by_origin(club_movies, top_n=2)) == 2


class TestPresenterGrouping:
    def test_alias_collapses_into_one_bucket(self, two_movies):
        presenters = group_by_presenter(normalize_movies(two_movies))
        assert presenters.to_dict(orient="records") == [{"presenter": "Eleonore", "movies": 2, "duration": 150}]

    def test_ordering_and_absent_presenters(self, club_movies):
        presenters = group_by_presenter(club_movies)
        assert presenters["presenter"].tolist() == ["Diego K.", "Chachacha", "Marta", "No-One"]
        assert presenters["movies"].tolist() == [2, 1, 1, 1]
        assert presenters["duration"].tolist() == [306, 122, 0, 0]

    def test_filtered_out_presenters_are_excluded(self, club_movies):
        filtered = apply_filters(club_movies, FilterState(season="1"))
        assert group_by_presenter(filtered)["presenter"].tolist() == ["Chachacha", "Diego K."]

    def test_top_n(self, club_movies):
        assert group_by_presenter(club_movies, top_n=1)["presenter"].tolist() == ["Diego K."]


class TestSeasonGrouping:
    def test_counts_and_durations(self, club_movies):
        seasons = group_by_season(club_movies)
        assert seasons["season"].tolist() == ["1", "10", "2"]
        assert seasons["movies"].tolist() == [2, 1, 3]
        assert seasons["duration"].tolist() == [283, 0, 145]
        assert seasons["avg_duration"].tolist() == pytest.approx([141.5, 0.0, 145 / 3])

    def test_missing_season_is_omitted(self):
        movies = normalize_movies([{"Title": "A", "Duration (min)": 90}, {"Title": "B", "Season": 1, "Duration (min)": 80}])
        assert group_by_season(movies)["season"].tolist() == ["1"]


def test_end_to_end_example(two_movies):
    movies = normalize_movies(two_movies)
    filtered = apply_filters(movies, FilterState(season="1", presenter="All", search_text=""))
    assert filtered["title"].tolist() == ["A", "B"]

    summary = compute_summary(filtered)
    assert summary.total_movies == 2
    assert summary.total_minutes == 150

    assert _pairs(group_by_genre(filtered), "genre", "count") == [("Drama", 2), ("Comedy", 1)]
    assert _pairs(group_by_presenter(filtered), "presenter", "movies") == [("Eleonore", 2)]
