# catalog/services/MovieService.py
import logging
import math
import re
from datetime import datetime
from itertools import groupby
from operator import itemgetter

import pandas as pd

from ..exceptions import InvalidArgument, NotFound
from ..repositories.MovieRepository import MovieRepository

logger = logging.getLogger(__name__)

RELEASE_DATE_FORMAT = "%d/%m/%Y"
RELEASE_DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def parse_release_date(value):
    """
    Parse a dd/MM/yyyy date exactly: two-digit day and month, four-digit year.
    strptime alone would also accept "1/2/2024", hence the pattern check.
    """
    if not RELEASE_DATE_PATTERN.match(value):
        raise InvalidArgument("Invalid release date. The format must be dd/MM/yyyy.")
    try:
        return datetime.strptime(value, RELEASE_DATE_FORMAT).date()
    except ValueError:
        raise InvalidArgument("Invalid release date. The format must be dd/MM/yyyy.")


class MovieService:
    def __init__(self, repository=None):
        self.repository = repository or MovieRepository()

    # CRUD

    def list_movies(self):
        return list(self.repository.movies())

    def list_paginated(self, page=1, page_size=10):
        if page < 1:
            raise InvalidArgument("Page number must be greater than or equal to 1.")
        if page_size < 1:
            raise InvalidArgument("Page size must be greater than or equal to 1.")

        qs = self.repository.movies()
        total_count = qs.count()
        total_pages = math.ceil(total_count / page_size)
        if page > total_pages:
            raise NotFound("Page not found.")

        return self._page(qs, page, page_size, total_count, total_pages)

    def get_movie(self, movie_id):
        movie = self.repository.get_full(movie_id)
        if movie is None:
            raise NotFound("No movie was found.")
        return movie

    def search_movies(self, title=None, release_date=None, page=1, page_size=10):
        """
        Title substring and/or exact release date search, paginated.
        Unlike list_paginated, an out-of-range page is clamped instead of rejected.
        """
        if page_size < 1:
            raise InvalidArgument("Page size must be greater than or equal to 1.")

        qs = self.repository.movies()
        if title:
            qs = self.repository.filter_by_title(qs, title)
        if release_date:
            qs = self.repository.filter_by_release_date(qs, parse_release_date(release_date))

        total_count = qs.count()
        if total_count == 0:
            raise NotFound("No movies match the given search criteria.")

        total_pages = math.ceil(total_count / page_size)
        page = min(max(page, 1), total_pages)
        return self._page(qs, page, page_size, total_count, total_pages)

    def create_movie(self, data):
        movie = self.repository.create(data)
        logger.info("Created movie %s (%s)", movie.id, movie.title)
        return movie

    def update_movie(self, movie_id, data):
        if data.get("id") != movie_id:
            raise InvalidArgument("The movie id in the body must match the id in the URL.")

        movie = self.repository.get(movie_id)
        if movie is None:
            raise NotFound("No movie was found to update.")

        movie = self.repository.update(movie, data)
        logger.info("Updated movie %s", movie_id)
        return movie

    def delete_movie(self, movie_id):
        movie = self.repository.get(movie_id)
        if movie is None:
            raise NotFound("No movie was found to delete.")

        removed = self.repository.delete(movie)
        logger.info(
            "Deleted movie %s with %s ratings, %s genres, %s streamings",
            movie_id, removed["ratings"], removed["genres"], removed["streamings"],
        )
        return removed

    # Reports

    def get_streamings(self, movie_id):
        movie = self.repository.get(movie_id, "streamings")
        if movie is None:
            raise NotFound("Movie not found.")
        streamings = list(movie.streamings.all())
        return {"total_streamings": len(streamings), "streamings": streamings}

    def get_average_ratings(self):
        return list(self.repository.average_ratings().values("id", "title", "average_rating"))

    def get_average_rating(self, movie_id):
        row = self.repository.average_rating(movie_id)
        if row is None:
            raise NotFound("Movie not found.")
        return row

    def get_movies_by_release_year(self):
        rows = self.repository.release_years()
        result = []
        for year, group in groupby(rows, key=itemgetter("year")):
            movies = [{"id": row["id"], "title": row["title"]} for row in group]
            result.append({"year": year, "count": len(movies), "movies": movies})
        return result

    def get_release_year(self, movie_id):
        row = self.repository.release_year(movie_id)
        if row is None:
            raise NotFound("Movie not found.")
        return row

    def filter_by_rating(self, score=None, comment=None):
        if score is None and not comment:
            raise InvalidArgument("Provide at least a score or a comment to filter by.")

        predicate = self.repository.rating_predicate(score=score, comment=comment)
        movies = [
            {"id": movie.id, "title": movie.title, "ratings": movie.matching_ratings}
            for movie in self.repository.movies_with_ratings(predicate)
        ]
        if not movies:
            raise NotFound("No movies match the given rating criteria.")
        return movies

    def get_average_rating_by_year_and_genre(self):
        """
        Average of per-movie averages, grouped by (release year, genre name).

        Each movie first gets its own mean score (0 when unrated); the group
        value is the mean of those, not of the individual scores.
        """
        movies = pd.DataFrame(list(self.repository.average_ratings().values("id", "year", "average_rating")))
        genres = pd.DataFrame(list(self.repository.genre_names()))
        if movies.empty or genres.empty:
            return []

        pairs = genres.merge(movies, left_on="movie_id", right_on="id")
        grouped = (
            pairs.groupby(["year", "name"], as_index=False)["average_rating"]
            .mean()
            .sort_values(["year", "name"])
        )
        return [
            {"year": int(row.year), "genre": row.name, "average_rating": float(row.average_rating)}
            for row in grouped.itertuples(index=False)
        ]

    # Helpers

    def _page(self, qs, page, page_size, total_count, total_pages):
        offset = (page - 1) * page_size
        return {
            "page": page,
            "page_size": page_size,
            "total_count": total_count,
            "total_pages": total_pages,
            "items": list(qs[offset:offset + page_size]),
        }
