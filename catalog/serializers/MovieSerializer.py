from rest_framework import serializers
from ..models import Movie
from .GenreSerializer import GenreSerializer
from .RatingSerializer import RatingSerializer
from .StreamingSerializer import StreamingSerializer


class MovieSerializer(serializers.ModelSerializer):
    # Writable so that updates can check it against the URL; ignored on create.
    id = serializers.IntegerField(required=False)
    streamings = StreamingSerializer(many=True, required=False)
    genres = GenreSerializer(many=True, required=False)
    ratings = RatingSerializer(many=True, required=False)

    class Meta:
        model = Movie
        fields = (
            "id",
            "title",
            "release_date",
            "streamings",
            "genres",
            "ratings",
        )


class MovieTitleSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()


class MovieRatingsSerializer(MovieTitleSerializer):
    """A movie with only the ratings that matched a rating filter."""
    ratings = RatingSerializer(many=True)
