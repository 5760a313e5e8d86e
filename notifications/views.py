"""Health probe views for the notification hub."""

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.services import health_service


class LivenessCheckView(APIView):
    """Liveness probe endpoint.

    Returns 200 while the process is running; dependencies are not checked.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, _request):
        liveness = health_service.get_liveness_status()
        return Response(liveness.model_dump(), status=status.HTTP_200_OK)


class ReadinessCheckView(APIView):
    """Readiness probe endpoint.

    Returns 200 with ``degraded`` set when the database or Redis is
    unavailable, so the service stays routable while connections recover.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, _request):
        readiness = health_service.get_readiness_status()
        return Response(readiness.model_dump(mode="json"), status=status.HTTP_200_OK)
