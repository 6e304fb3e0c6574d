from .GenreSerializer import GenreSerializer
from .MovieSerializer import MovieRatingsSerializer, MovieSerializer, MovieTitleSerializer
from .RatingSerializer import RatingSerializer
from .ReportSerializer import (
    AverageRatingSerializer,
    MoviePageSerializer,
    MovieStreamingsSerializer,
    ReleaseYearGroupSerializer,
    ReleaseYearSerializer,
    YearGenreAverageSerializer,
)
from .StreamingSerializer import StreamingSerializer
