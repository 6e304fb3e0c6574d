from django.urls import path, include
from rest_framework.routers import DefaultRouter

from catalog.views.MovieView import MovieViewSet
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

# Router for viewsets
router = DefaultRouter(trailing_slash=False)
router.register(r"filmes", MovieViewSet, basename="movie")

urlpatterns = [
    # API schema & docs
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("schema/swagger-ui/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("schema/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Router endpoints (filmes)
    path("", include(router.urls)),
]
