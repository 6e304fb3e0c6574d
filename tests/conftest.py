import datetime

import pytest
from rest_framework.test import APIClient

from catalog.models import Genre, Movie, Rating, Streaming
from catalog.services.MovieService import MovieService


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def movie_service():
    return MovieService()


@pytest.fixture
def make_movie(db):
    """Factory: make_movie(title, release_date, streamings=[...], genres=[...], ratings=[(score, comment)])."""

    def _make_movie(title="Movie", release_date=datetime.date(2020, 1, 1), streamings=(), genres=(), ratings=()):
        movie = Movie.objects.create(title=title, release_date=release_date)
        for name in streamings:
            Streaming.objects.create(movie=movie, name=name)
        for name in genres:
            Genre.objects.create(movie=movie, name=name)
        for score, comment in ratings:
            Rating.objects.create(movie=movie, score=score, comment=comment)
        return movie

    return _make_movie
