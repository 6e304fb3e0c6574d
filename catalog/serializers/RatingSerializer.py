from rest_framework import serializers
from ..models import Rating


class RatingSerializer(serializers.ModelSerializer):
    # Ratings are always written through their movie, so movie_id is output only.
    movie_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Rating
        fields = ("id", "movie_id", "score", "comment")
