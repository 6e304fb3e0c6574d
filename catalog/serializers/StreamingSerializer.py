from rest_framework import serializers
from ..models import Streaming


class StreamingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Streaming
        fields = ("id", "name")
