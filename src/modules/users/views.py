"""User profile API views.

``POST /api/v1/users`` creates the caller's profile from the token
identity; ``GET``/``PUT /api/v1/users/me`` read and update it.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError, ValidationFailed
from modules.core.responses import domain_error_response, success_response
from modules.users.dtos import CreateProfileDTO, UpdateProfileDTO
from modules.users.principal import role_claim_of, subject_of
from modules.users.repositories.django_repository import UserProfileDjangoRepository
from modules.users.serializers import (
    CreateProfileSerializer,
    UpdateProfileSerializer,
    UserProfileSerializer,
)
from modules.users.services import UserProfileService


class UserViewSet(GenericViewSet):
    """Profile endpoints for the authenticated caller."""

    serializer_class = UserProfileSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserProfileService(repository=UserProfileDjangoRepository())

    def create(self, request: Request) -> Response:
        """POST /api/v1/users"""
        serializer = CreateProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateProfileDTO(
                subject=subject_of(request.user),
                name=serializer.validated_data["name"],
                email=serializer.validated_data["email"],
                role=role_claim_of(request.user),
            )
        except PydanticValidationError as exc:
            return domain_error_response(ValidationFailed.from_pydantic(exc))

        try:
            profile = self._service.create_profile(dto)
        except DomainError as exc:
            return domain_error_response(exc)

        return success_response(
            UserProfileSerializer(profile).data, status.HTTP_201_CREATED
        )

    @action(detail=False, methods=["get", "put"])
    def me(self, request: Request) -> Response:
        """GET / PUT /api/v1/users/me"""
        subject = subject_of(request.user)

        if request.method == "GET":
            try:
                profile = self._service.get_profile(subject)
            except DomainError as exc:
                return domain_error_response(exc)
            return success_response(UserProfileSerializer(profile).data)

        serializer = UpdateProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = UpdateProfileDTO(
                name=data.get("name") or None,
                email=data.get("email") or None,
            )
        except PydanticValidationError as exc:
            return domain_error_response(ValidationFailed.from_pydantic(exc))

        try:
            profile = self._service.update_profile(subject, dto)
        except DomainError as exc:
            return domain_error_response(exc)

        return success_response(UserProfileSerializer(profile).data)
