# catalog/views/MovieView.py
from django.urls import reverse
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..exceptions import InvalidArgument
from ..serializers import (
    AverageRatingSerializer,
    MoviePageSerializer,
    MovieRatingsSerializer,
    MovieSerializer,
    MovieStreamingsSerializer,
    ReleaseYearGroupSerializer,
    ReleaseYearSerializer,
    YearGenreAverageSerializer,
)
from ..services.MovieService import MovieService

# Query integers bind like a signed 32-bit int.
MAX_INT_PARAM = 2**31 - 1

PAGE_PARAMETERS = [
    OpenApiParameter("page", int, description="Page number, starting at 1 (default 1)"),
    OpenApiParameter("pageSize", int, description="Movies per page (default 10)"),
]


def int_param(request, name, default=None):
    """Read an optional integer query parameter; blank counts as absent."""
    value = request.query_params.get(name)
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        raise InvalidArgument(f"Query parameter '{name}' must be an integer.")
    if not -MAX_INT_PARAM - 1 <= number <= MAX_INT_PARAM:
        raise InvalidArgument(f"Query parameter '{name}' is out of range.")
    return number


class MovieViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]
    lookup_value_regex = r"[0-9]+"

    movie_service = MovieService()

    @extend_schema(responses=MovieSerializer(many=True))
    def list(self, request):
        movies = self.movie_service.list_movies()
        return Response(MovieSerializer(movies, many=True).data)

    @extend_schema(parameters=PAGE_PARAMETERS, responses=MoviePageSerializer)
    @action(detail=False, methods=["get"], url_path="paginados")
    def paginated(self, request):
        result = self.movie_service.list_paginated(
            page=int_param(request, "page", 1),
            page_size=int_param(request, "pageSize", 10),
        )
        return Response(MoviePageSerializer(result).data)

    @extend_schema(responses=MovieSerializer)
    def retrieve(self, request, pk=None):
        movie = self.movie_service.get_movie(int(pk))
        return Response(MovieSerializer(movie).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("titulo", str, description="Substring of the title"),
            OpenApiParameter("dataLancamento", str, description="Exact release date, dd/MM/yyyy"),
            *PAGE_PARAMETERS,
        ],
        responses=MoviePageSerializer,
    )
    @action(detail=False, methods=["get"], url_path="pesquisar")
    def search(self, request):
        result = self.movie_service.search_movies(
            title=request.query_params.get("titulo") or None,
            release_date=request.query_params.get("dataLancamento") or None,
            page=int_param(request, "page", 1),
            page_size=int_param(request, "pageSize", 10),
        )
        return Response(MoviePageSerializer(result).data)

    @extend_schema(request=MovieSerializer, responses={201: MovieSerializer})
    def create(self, request):
        serializer = MovieSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        movie = self.movie_service.create_movie(serializer.validated_data)

        location = request.build_absolute_uri(reverse("movie-detail", args=[movie.id]))
        return Response(
            {"message": "Movie created successfully.", "movie": MovieSerializer(movie).data},
            status=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    @extend_schema(request=MovieSerializer)
    def update(self, request, pk=None):
        serializer = MovieSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.movie_service.update_movie(int(pk), serializer.validated_data)
        return Response({"message": "Movie updated successfully."})

    def destroy(self, request, pk=None):
        self.movie_service.delete_movie(int(pk))
        return Response({"message": "Movie deleted successfully."})

    @extend_schema(responses=MovieStreamingsSerializer)
    @action(detail=True, methods=["get"], url_path="streamings")
    def streamings(self, request, pk=None):
        result = self.movie_service.get_streamings(int(pk))
        return Response(MovieStreamingsSerializer(result).data)

    @extend_schema(responses=AverageRatingSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="media-avaliacao", url_name="average-ratings")
    def average_ratings(self, request):
        rows = self.movie_service.get_average_ratings()
        return Response(AverageRatingSerializer(rows, many=True).data)

    @extend_schema(responses=AverageRatingSerializer)
    @action(detail=True, methods=["get"], url_path="media-avaliacao", url_name="average-rating")
    def average_rating(self, request, pk=None):
        row = self.movie_service.get_average_rating(int(pk))
        return Response(AverageRatingSerializer(row).data)

    @extend_schema(responses=ReleaseYearGroupSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="filmes-lancamento")
    def by_release_year(self, request):
        groups = self.movie_service.get_movies_by_release_year()
        return Response(ReleaseYearGroupSerializer(groups, many=True).data)

    @extend_schema(responses=ReleaseYearSerializer)
    @action(detail=True, methods=["get"], url_path="lancamento")
    def release_year(self, request, pk=None):
        row = self.movie_service.get_release_year(int(pk))
        return Response(ReleaseYearSerializer(row).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("pontuacao", int, description="Exact rating score, 1 to 5"),
            OpenApiParameter("comentario", str, description="Substring of the rating comment"),
        ],
        responses=MovieRatingsSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="avaliacao")
    def by_rating(self, request):
        movies = self.movie_service.filter_by_rating(
            score=int_param(request, "pontuacao"),
            comment=request.query_params.get("comentario") or None,
        )
        return Response(MovieRatingsSerializer(movies, many=True).data)

    @extend_schema(responses=YearGenreAverageSerializer(many=True))
    @action(detail=False, methods=["get"], url_path="media-avaliacoes-genero")
    def average_rating_by_year_and_genre(self, request):
        rows = self.movie_service.get_average_rating_by_year_and_genre()
        return Response(YearGenreAverageSerializer(rows, many=True).data)
