"""API views for analytics.

Dashboard figures and the calendar month view, computed from the booking
registry on every request.
"""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.apps import get_runtime
from apps.bookings.serializers import BookingSerializer

from .services import dashboard_stats, month_summary, next_bookings


class OverviewAnalyticsView(APIView):
    """Return the dashboard statistics."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, format=None):  # type: ignore
        registry = get_runtime().registry
        stats = dashboard_stats(registry)
        stats['next_bookings'] = BookingSerializer(next_bookings(registry), many=True).data
        return Response(stats)


class CalendarMonthView(APIView):
    """Active bookings of one month grouped by day, with the month totals."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, year, month, format=None):  # type: ignore
        try:
            summary = month_summary(get_runtime().registry, year, month)
        except ValueError as exc:
            return Response({'detail': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        days = summary.pop('days')
        summary['days'] = {
            day.isoformat(): BookingSerializer(bookings, many=True).data
            for day, bookings in days.items()
        }
        return Response(summary)
