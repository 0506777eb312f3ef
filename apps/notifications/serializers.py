"""Serializers for notifications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class SendEmailSerializer(serializers.Serializer):
    """Raw email: ``body`` is sent as the HTML part."""

    email = serializers.EmailField()
    subject = serializers.CharField(max_length=255)
    body = serializers.CharField()
