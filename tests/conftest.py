"""Shared fixtures for the movie club dashboard tests."""

import pytest

from movieclub.data import normalize_movies, prepare_context


@pytest.fixture
def two_movies():
    """Two season-1 movies presented by the same person under different labels."""
    return [
        {"Title": "A", "Season": "1", "Presented by": "E.", "Duration (min)": "100", "Genre": "Drama", "Origin": "US"},
        {"Title": "B", "Season": "1", "Presented by": "Eleonore", "Duration (min)": "50", "Genre": "Drama,Comedy", "Origin": "FR"},
    ]


@pytest.fixture
def club_records():
    """A small collection covering aliases, gaps and malformed fields."""
    return [
        {
            "Title": "Stalker",
            "Season": 1,
            "Presented by": "Diego",
            "Duration (min)": "161 min",
            "Genre": "Drama, Sci-Fi",
            "Origin": "USSR",
            "Release Year": 1979,
            "Director": "Andrei Tarkovsky",
            "RottenTomatoes Rating": "100%",
        },
        {
            "Title": "Amélie",
            "Season": 1,
            "Presented by": "Cha",
            "Duration (min)": 122,
            "Genre": "Comedy, Romance",
            "Origin": "France",
            "Release Year": "2001",
            "Director": "Jean-Pierre Jeunet",
            "RottenTomatoes Rating": "89%",
        },
        {
            "Title": "Paris, Texas",
            "Season": 2,
            "Presented by": "Ketels",
            "Duration (min)": "145",
            "Genre": "Drama",
            "Origin": "West Germany",
            "Release Year": 1984,
            "Director": "Wim Wenders",
            "RottenTomatoes Rating": "n/a",
        },
        {
            "Title": "Parasite",
            "Season": 2,
            "Presented by": "null",
            "Duration (min)": None,
            "Genre": "Thriller, Drama",
            "Origin": None,
            "RottenTomatoes Rating": "99%",
        },
        {
            "Title": "The Host",
            "Season": "10",
            "Presented by": None,
            "Duration (min)": "unknown",
            "Genre": None,
            "Origin": "",
        },
        {
            "Title": "Chungking Express",
            "Season": "2",
            "Presented by": "Marta",
            "Duration (min)": "-5",
            "Genre": "Romance,",
            "Origin": "Hong Kong",
            "RottenTomatoes Rating": "88.5% (critics)",
        },
    ]


@pytest.fixture
def club_movies(club_records):
    return normalize_movies(club_records)


@pytest.fixture
def club_ctx(club_movies):
    def _make(**raw_filters):
        return prepare_context(raw_filters, {"files": ["movies.json"], "movies": club_movies})

    return _make
