from django.contrib import admin
from django.db.models import Count

from .models import Genre, Movie, Rating, Streaming
from .repositories.MovieRepository import average_rating_expression


class StreamingInline(admin.TabularInline):
    """Inline streamings for a movie."""
    model = Streaming
    extra = 0
    fields = ("name",)


class GenreInline(admin.TabularInline):
    """Inline genres for a movie."""
    model = Genre
    extra = 0
    fields = ("name",)


class RatingInline(admin.TabularInline):
    """Inline ratings for a movie."""
    model = Rating
    extra = 0
    fields = ("score", "comment")
    show_change_link = True


@admin.register(Movie)
class MovieAdmin(admin.ModelAdmin):
    list_display = (
        "id", "title", "release_date", "get_genres", "get_avg_rating", "get_ratings_count"
    )
    list_display_links = ("id", "title")
    search_fields = ("title", "genres__name", "streamings__name")
    list_filter = ("release_date",)
    ordering = ("id",)
    inlines = [StreamingInline, GenreInline, RatingInline]
    date_hierarchy = "release_date"

    def get_queryset(self, request):
        # Annotate queryset for performance (instead of per-row queries)
        qs = super().get_queryset(request)
        return qs.annotate(
            avg_rating=average_rating_expression(),
            ratings_count=Count("ratings"),
        ).prefetch_related("genres")

    def get_genres(self, obj):
        """Display genres as a comma-separated list."""
        return ", ".join(g.name for g in obj.genres.all())
    get_genres.short_description = "Genres"

    def get_avg_rating(self, obj):
        return round(obj.avg_rating, 2)
    get_avg_rating.admin_order_field = "avg_rating"
    get_avg_rating.short_description = "Avg Rating"

    def get_ratings_count(self, obj):
        return obj.ratings_count
    get_ratings_count.admin_order_field = "ratings_count"
    get_ratings_count.short_description = "Ratings Count"


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("id", "movie", "score", "comment")
    list_filter = ("score",)
    search_fields = ("movie__title", "comment")
    ordering = ("-id",)
    autocomplete_fields = ("movie",)


@admin.register(Genre)
class GenreAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "movie")
    search_fields = ("name", "movie__title")
    ordering = ("name",)
    autocomplete_fields = ("movie",)


@admin.register(Streaming)
class StreamingAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "movie")
    search_fields = ("name", "movie__title")
    ordering = ("name",)
    autocomplete_fields = ("movie",)
