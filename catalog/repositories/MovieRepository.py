# catalog/repositories/MovieRepository.py
from django.db import transaction
from django.db.models import Avg, FloatField, Prefetch, Q, Value
from django.db.models.functions import Coalesce, ExtractYear

from ..models import Genre, Movie, Rating, Streaming

RELATED_COLLECTIONS = ("streamings", "genres", "ratings")


def average_rating_expression():
    """Mean rating score, or 0.0 for a movie nobody rated."""
    return Coalesce(Avg("ratings__score"), Value(0.0), output_field=FloatField())


class MovieRepository:
    """
    Storage access for movies and the records they own.
    Every method runs against the request's database connection; nothing is cached.
    """

    def movies(self):
        return Movie.objects.prefetch_related(*RELATED_COLLECTIONS).order_by("id")

    def get(self, movie_id, *related):
        return Movie.objects.prefetch_related(*related).filter(id=movie_id).first()

    def get_full(self, movie_id):
        return self.get(movie_id, *RELATED_COLLECTIONS)

    @transaction.atomic
    def create(self, data):
        data = dict(data)
        data.pop("id", None)
        children = {name: data.pop(name, []) for name in RELATED_COLLECTIONS}

        movie = Movie.objects.create(**data)
        self._add_children(movie, children)
        return self.get_full(movie.id)

    @transaction.atomic
    def update(self, movie, data):
        """Overwrite scalar fields and replace each collection present in data."""
        data = dict(data)
        data.pop("id", None)
        children = {name: data.pop(name) for name in RELATED_COLLECTIONS if name in data}

        for field, value in data.items():
            setattr(movie, field, value)
        movie.save()

        for name in children:
            getattr(movie, name).all().delete()
        self._add_children(movie, children)
        return self.get_full(movie.id)

    @transaction.atomic
    def delete(self, movie):
        # Foreign keys into movies are PROTECT: dependents go first.
        ratings, _ = Rating.objects.filter(movie=movie).delete()
        genres, _ = Genre.objects.filter(movie=movie).delete()
        streamings, _ = Streaming.objects.filter(movie=movie).delete()
        movie.delete()
        return {"ratings": ratings, "genres": genres, "streamings": streamings}

    def _add_children(self, movie, children):
        Streaming.objects.bulk_create(
            Streaming(movie=movie, **item) for item in children.get("streamings", [])
        )
        Genre.objects.bulk_create(
            Genre(movie=movie, **item) for item in children.get("genres", [])
        )
        Rating.objects.bulk_create(
            Rating(movie=movie, **item) for item in children.get("ratings", [])
        )

    # Filters

    @staticmethod
    def filter_by_title(qs, title):
        return qs.filter(title__contains=title)

    @staticmethod
    def filter_by_release_date(qs, release_date):
        return qs.filter(release_date=release_date)

    @staticmethod
    def rating_predicate(score=None, comment=None):
        predicate = Q()
        if score is not None:
            predicate &= Q(score=score)
        if comment:
            predicate &= Q(comment__contains=comment)
        return predicate

    def movies_with_ratings(self, predicate):
        """
        Movies owning at least one rating that satisfies predicate.
        Only the satisfying ratings are attached, as `matching_ratings`.
        """
        matching = Rating.objects.filter(predicate).order_by("id")
        return (
            Movie.objects.filter(id__in=matching.values("movie_id"))
            .prefetch_related(Prefetch("ratings", queryset=matching, to_attr="matching_ratings"))
            .order_by("id")
        )

    # Grouping and aggregation

    def average_ratings(self):
        return (
            Movie.objects.annotate(
                average_rating=average_rating_expression(),
                year=ExtractYear("release_date"),
            )
            .order_by("id")
        )

    def average_rating(self, movie_id):
        return (
            self.average_ratings()
            .filter(id=movie_id)
            .values("id", "title", "average_rating")
            .first()
        )

    def release_years(self):
        return (
            Movie.objects.annotate(year=ExtractYear("release_date"))
            .order_by("-year", "id")
            .values("id", "title", "year")
        )

    def release_year(self, movie_id):
        return (
            Movie.objects.filter(id=movie_id)
            .annotate(year=ExtractYear("release_date"))
            .values("id", "title", "year")
            .first()
        )

    def genre_names(self):
        return Genre.objects.order_by("id").values("movie_id", "name")
