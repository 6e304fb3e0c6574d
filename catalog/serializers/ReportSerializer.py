from rest_framework import serializers
from .MovieSerializer import MovieSerializer, MovieTitleSerializer
from .StreamingSerializer import StreamingSerializer


class MoviePageSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    total_count = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    items = MovieSerializer(many=True)


class MovieStreamingsSerializer(serializers.Serializer):
    total_streamings = serializers.IntegerField()
    streamings = StreamingSerializer(many=True)


class AverageRatingSerializer(MovieTitleSerializer):
    average_rating = serializers.FloatField()


class ReleaseYearSerializer(MovieTitleSerializer):
    year = serializers.IntegerField()


class ReleaseYearGroupSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    count = serializers.IntegerField()
    movies = MovieTitleSerializer(many=True)


class YearGenreAverageSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    genre = serializers.CharField()
    average_rating = serializers.FloatField()
