import datetime
import logging

import pytest
from django.db import DatabaseError

from catalog.models import Movie, Rating
from catalog.repositories.MovieRepository import MovieRepository

pytestmark = pytest.mark.django_db

MOVIE_PAYLOAD = {
    "title": "Dune",
    "release_date": "2021-10-22",
    "streamings": [{"name": "Max"}],
    "genres": [{"name": "Sci-Fi"}, {"name": "Adventure"}],
    "ratings": [{"score": 5, "comment": "epic"}],
}


class TestCrud:
    def test_create_returns_location_and_movie(self, api_client):
        response = api_client.post("/api/filmes", MOVIE_PAYLOAD, format="json")

        assert response.status_code == 201
        movie = response.json()["movie"]
        assert response.json()["message"] == "Movie created successfully."
        assert response["Location"] == f"http://testserver/api/filmes/{movie['id']}"
        assert movie["title"] == "Dune"
        assert [g["name"] for g in movie["genres"]] == ["Sci-Fi", "Adventure"]
        assert movie["ratings"][0]["movie_id"] == movie["id"]

    def test_create_then_get(self, api_client):
        created = api_client.post("/api/filmes", MOVIE_PAYLOAD, format="json").json()["movie"]

        fetched = api_client.get(f"/api/filmes/{created['id']}").json()

        assert fetched == created
        assert fetched["release_date"] == "2021-10-22"
        assert [s["name"] for s in fetched["streamings"]] == ["Max"]

    @pytest.mark.parametrize("payload", [
        {"release_date": "2021-10-22"},
        {"title": "", "release_date": "2021-10-22"},
        {"title": "No date"},
        {"title": "Bad score", "release_date": "2021-10-22", "ratings": [{"score": 6}]},
        {"title": "Bad score", "release_date": "2021-10-22", "ratings": [{"score": 0}]},
    ])
    def test_create_validation(self, api_client, payload):
        response = api_client.post("/api/filmes", payload, format="json")

        assert response.status_code == 400
        assert Movie.objects.count() == 0

    def test_list(self, api_client, make_movie):
        make_movie(title="A", genres=["Drama"])
        make_movie(title="B")

        body = api_client.get("/api/filmes").json()

        assert [m["title"] for m in body] == ["A", "B"]
        assert body[0]["genres"][0]["name"] == "Drama"
        assert body[1]["ratings"] == []

    def test_get_missing_is_404(self, api_client):
        response = api_client.get("/api/filmes/999")

        assert response.status_code == 404
        assert response.json()["detail"] == "No movie was found."

    def test_non_numeric_id_does_not_route(self, api_client):
        assert api_client.get("/api/filmes/abc").status_code == 404

    def test_update(self, api_client, make_movie):
        movie = make_movie(title="Old")
        payload = {"id": movie.id, "title": "New", "release_date": "1999-12-31"}

        response = api_client.put(f"/api/filmes/{movie.id}", payload, format="json")

        assert response.status_code == 200
        assert response.json() == {"message": "Movie updated successfully."}
        movie.refresh_from_db()
        assert movie.title == "New"
        assert movie.release_date == datetime.date(1999, 12, 31)

    def test_update_with_mismatched_id_is_400(self, api_client, make_movie):
        movie = make_movie()
        payload = {"id": movie.id + 1, "title": "New", "release_date": "1999-12-31"}

        response = api_client.put(f"/api/filmes/{movie.id}", payload, format="json")

        assert response.status_code == 400
        assert response.json()["detail"] == "The movie id in the body must match the id in the URL."

    def test_delete(self, api_client, make_movie):
        movie = make_movie(ratings=[(3, "x")], genres=["Drama"], streamings=["Netflix"])

        response = api_client.delete(f"/api/filmes/{movie.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Movie deleted successfully."}
        assert api_client.get(f"/api/filmes/{movie.id}").status_code == 404

    def test_delete_missing_is_404(self, api_client):
        assert api_client.delete("/api/filmes/31").status_code == 404


class TestPaginationAndSearch:
    def test_paginated(self, api_client, make_movie):
        for i in range(12):
            make_movie(title=f"Movie {i}")

        body = api_client.get("/api/filmes/paginados", {"page": 2, "pageSize": 5}).json()

        assert body["page"] == 2
        assert body["page_size"] == 5
        assert body["total_count"] == 12
        assert body["total_pages"] == 3
        assert [m["title"] for m in body["items"]] == [f"Movie {i}" for i in range(5, 10)]

    def test_paginated_defaults(self, api_client, make_movie):
        make_movie()

        body = api_client.get("/api/filmes/paginados").json()

        assert (body["page"], body["page_size"]) == (1, 10)

    @pytest.mark.parametrize("params, status_code", [
        ({"page": 0}, 400),
        ({"pageSize": 0}, 400),
        ({"page": "two"}, 400),
        ({"page": 5}, 404),
        ({"pageSize": "99999999999999999999"}, 400),
        ({"page": str(2**31)}, 400),
    ])
    def test_paginated_errors(self, api_client, make_movie, params, status_code):
        make_movie()
        assert api_client.get("/api/filmes/paginados", params).status_code == status_code

    def test_search(self, api_client, make_movie):
        make_movie(title="Toy Story", release_date=datetime.date(1995, 11, 22))
        make_movie(title="Toy Story 2", release_date=datetime.date(1999, 11, 24))

        body = api_client.get("/api/filmes/pesquisar", {"titulo": "Toy", "dataLancamento": "24/11/1999"}).json()

        assert body["total_count"] == 1
        assert body["items"][0]["title"] == "Toy Story 2"

    def test_search_invalid_date_is_400(self, api_client, make_movie):
        make_movie()
        response = api_client.get("/api/filmes/pesquisar", {"dataLancamento": "31/02/2024"})
        assert response.status_code == 400

    @pytest.mark.parametrize("params", [
        {"pageSize": "99999999999999999999"},
        {"page": "-99999999999999999999"},
    ])
    def test_search_rejects_oversized_integers(self, api_client, make_movie, params):
        make_movie()
        assert api_client.get("/api/filmes/pesquisar", params).status_code == 400

    def test_largest_page_size_is_accepted(self, api_client, make_movie):
        make_movie()

        body = api_client.get("/api/filmes/paginados", {"pageSize": 2**31 - 1}).json()

        assert body["total_pages"] == 1
        assert len(body["items"]) == 1

    def test_search_without_results_is_404(self, api_client, make_movie):
        make_movie(title="Up")
        assert api_client.get("/api/filmes/pesquisar", {"titulo": "Down"}).status_code == 404


class TestReports:
    def test_streamings(self, api_client, make_movie):
        movie = make_movie(streamings=["Netflix", "Disney+"])

        body = api_client.get(f"/api/filmes/{movie.id}/streamings").json()

        assert body["total_streamings"] == 2
        assert [s["name"] for s in body["streamings"]] == ["Netflix", "Disney+"]

    def test_streamings_missing_movie(self, api_client):
        assert api_client.get("/api/filmes/4/streamings").status_code == 404

    def test_average_ratings(self, api_client, make_movie):
        rated = make_movie(title="Rated", ratings=[(4, None), (5, None)])
        unrated = make_movie(title="Unrated")

        body = api_client.get("/api/filmes/media-avaliacao").json()

        assert body == [
            {"id": rated.id, "title": "Rated", "average_rating": 4.5},
            {"id": unrated.id, "title": "Unrated", "average_rating": 0.0},
        ]

    def test_average_rating_for_movie(self, api_client, make_movie):
        movie = make_movie(title="Solo")

        response = api_client.get(f"/api/filmes/{movie.id}/media-avaliacao")

        assert response.status_code == 200
        assert response.json() == {"id": movie.id, "title": "Solo", "average_rating": 0.0}

    def test_movies_by_release_year(self, api_client, make_movie):
        old = make_movie(title="Old", release_date=datetime.date(1980, 1, 1))
        new = make_movie(title="New", release_date=datetime.date(2020, 1, 1))

        body = api_client.get("/api/filmes/filmes-lancamento").json()

        assert body == [
            {"year": 2020, "count": 1, "movies": [{"id": new.id, "title": "New"}]},
            {"year": 1980, "count": 1, "movies": [{"id": old.id, "title": "Old"}]},
        ]

    def test_release_year(self, api_client, make_movie):
        movie = make_movie(title="Heat", release_date=datetime.date(1995, 12, 15))

        body = api_client.get(f"/api/filmes/{movie.id}/lancamento").json()

        assert body == {"id": movie.id, "title": "Heat", "year": 1995}

    def test_filter_by_rating(self, api_client, make_movie):
        movie = make_movie(title="Mixed", ratings=[(5, "ok"), (3, "meh")])

        body = api_client.get("/api/filmes/avaliacao", {"pontuacao": 5}).json()

        assert len(body) == 1
        assert body[0]["id"] == movie.id
        assert [(r["score"], r["comment"]) for r in body[0]["ratings"]] == [(5, "ok")]

    @pytest.mark.parametrize("params, status_code", [
        ({}, 400),
        ({"comentario": ""}, 400),
        ({"pontuacao": "high"}, 400),
        ({"comentario": "nothing like this"}, 404),
    ])
    def test_filter_by_rating_errors(self, api_client, make_movie, params, status_code):
        make_movie(ratings=[(5, "ok")])
        assert api_client.get("/api/filmes/avaliacao", params).status_code == status_code

    def test_average_by_year_and_genre(self, api_client, make_movie):
        make_movie(release_date=datetime.date(2020, 1, 1), genres=["Drama"], ratings=[(4, None)])
        make_movie(release_date=datetime.date(2020, 6, 1), genres=["Drama"])

        body = api_client.get("/api/filmes/media-avaliacoes-genero").json()

        assert body == [{"year": 2020, "genre": "Drama", "average_rating": 2.0}]


class TestErrorHandling:
    def test_storage_failure_is_500(self, api_client, make_movie, monkeypatch):
        movie = make_movie(ratings=[(3, "x")])

        def fail(self, movie):
            raise DatabaseError("connection lost")

        monkeypatch.setattr(MovieRepository, "delete", fail)
        response = api_client.delete(f"/api/filmes/{movie.id}")

        assert response.status_code == 500
        assert response.json() == {"detail": "Storage failure."}
        assert Rating.objects.filter(movie=movie).exists()

    def test_storage_failure_is_logged_with_traceback(self, api_client, make_movie, monkeypatch, caplog):
        movie = make_movie()

        def fail(self, movie):
            raise DatabaseError("connection lost")

        monkeypatch.setattr(MovieRepository, "delete", fail)
        catalog_logger = logging.getLogger("catalog")
        catalog_logger.addHandler(caplog.handler)
        try:
            api_client.delete(f"/api/filmes/{movie.id}")
        finally:
            catalog_logger.removeHandler(caplog.handler)

        records = [r for r in caplog.records if r.name == "catalog.exceptions"]
        assert len(records) == 1
        assert records[0].levelname == "ERROR"
        assert "connection lost" in records[0].getMessage()
        assert records[0].exc_info[0] is DatabaseError

    def test_protected_delete_is_storage_error(self, api_client, make_movie, monkeypatch):
        movie = make_movie(ratings=[(3, "x")])

        # Skip the dependent removal: the PROTECT foreign key must refuse.
        monkeypatch.setattr(MovieRepository, "delete", lambda self, movie: movie.delete())
        response = api_client.delete(f"/api/filmes/{movie.id}")

        assert response.status_code == 500
        assert Movie.objects.filter(id=movie.id).exists()


def test_schema(api_client):
    response = api_client.get("/api/schema/")
    assert response.status_code == 200


def test_admin_changelist(admin_client, make_movie):
    make_movie(title="Admin visible", ratings=[(4, None)], genres=["Drama"])

    response = admin_client.get("/admin/catalog/movie/")

    assert response.status_code == 200
    assert b"Admin visible" in response.content
