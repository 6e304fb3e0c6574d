from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Movie(models.Model):
    title = models.CharField(max_length=512, db_index=True)
    release_date = models.DateField(db_index=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["title"], name="movie_title_idx"),
            models.Index(fields=["release_date"], name="movie_release_date_idx"),
        ]

    def __str__(self):
        return f"{self.title} ({self.release_date.year if self.release_date else 'n/a'})"


class Streaming(models.Model):
    """Streaming service a movie is available on (e.g., Netflix)."""
    movie = models.ForeignKey(Movie, on_delete=models.PROTECT, related_name="streamings")
    name = models.CharField(max_length=128)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


class Genre(models.Model):
    """Movie genres (e.g., Action, Comedy)."""
    movie = models.ForeignKey(Movie, on_delete=models.PROTECT, related_name="genres")
    name = models.CharField(max_length=64, db_index=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


class Rating(models.Model):
    """A 1 to 5 score with an optional comment, owned by one movie."""
    movie = models.ForeignKey(Movie, on_delete=models.PROTECT, related_name="ratings")
    score = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["movie"], name="rating_movie_idx"),
            models.Index(fields=["score"], name="rating_score_idx"),
        ]

    def __str__(self):
        return f"{self.movie_id}:{self.score}"
