"""User profile DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.users.models import UserProfile


class CreateProfileSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=254)


class UpdateProfileSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(max_length=254, required=False, allow_blank=True)


class UserProfileSerializer(serializers.ModelSerializer):
    auth0_id = serializers.CharField(source="auth_subject", read_only=True)

    class Meta:
        model = UserProfile
        fields = ["id", "auth0_id", "name", "email", "role", "created_at", "updated_at"]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Brief profile embedded in orders and messages."""

    class Meta:
        model = UserProfile
        fields = ["id", "name", "email", "role"]
        read_only_fields = fields
