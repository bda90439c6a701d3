"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Each request
first resolves the caller's ``Principal``; domain exceptions are caught
and rendered as the error envelope.  Image URLs are resolved after the
service call returns, outside its transaction, and a failed lookup
only leaves ``image_url`` empty.
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

import structlog
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.assets.exceptions import ImageUploadError, ImageURLError
from modules.assets.services import get_image_service
from modules.core.exceptions import DomainError, ValidationFailed
from modules.core.pagination import StandardResultsSetPagination
from modules.core.responses import domain_error_response, success_response
from modules.orders.dtos import CreateOrderDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.policies import Intent, ensure_role
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import CreateOrderSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.users.principal import Principal, PrincipalResolver
from modules.users.repositories.django_repository import UserProfileDjangoRepository

logger = structlog.get_logger(__name__)


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.alive()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(order_repository=OrderDjangoRepository())
        self._resolver = PrincipalResolver(UserProfileDjangoRepository())
        self._images = get_image_service()

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action in {"create", "reorder"}:
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _image_urls(self, orders: Iterable[Order]) -> dict[UUID, Optional[str]]:
        urls: dict[UUID, Optional[str]] = {}
        for order in orders:
            if not order.image_key:
                continue
            try:
                urls[order.id] = self._images.get_image_url(order.image_key)
            except ImageURLError as exc:
                logger.warning(
                    "order.image_url_failed",
                    order_id=str(order.id),
                    error=str(exc.__cause__ or exc),
                )
        return urls

    def _render(self, order: Order) -> dict:
        return OrderSerializer(
            order, context={"image_urls": self._image_urls([order])}
        ).data

    def _principal(self, request: Request) -> Principal:
        return self._resolver.resolve(request.user)

    def _discard_upload(self, key: str) -> None:
        try:
            self._images.delete_image(key)
        except ImageUploadError:
            logger.warning("order.image_cleanup_failed", image_key=key)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders

        Accepts JSON ``{description, quantity, imageKey?}`` or multipart
        form data with an optional ``image`` file.
        """
        try:
            principal = self._principal(request)
            ensure_role(principal, Intent.CREATE)
        except DomainError as exc:
            return domain_error_response(exc)

        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateOrderDTO(
                description=data["description"],
                quantity=data["quantity"],
                image_key=data.get("image_key"),
            )
        except PydanticValidationError as exc:
            return domain_error_response(ValidationFailed.from_pydantic(exc))

        uploaded_key: Optional[str] = None
        try:
            if data.get("image") is not None:
                uploaded_key = self._images.upload_image(data["image"])
                dto = dto.model_copy(update={"image_key": uploaded_key})
            order = self._service.create_order(principal, dto)
        except DomainError as exc:
            if uploaded_key:
                self._discard_upload(uploaded_key)
            return domain_error_response(exc)
        except Exception:
            if uploaded_key:
                self._discard_upload(uploaded_key)
            raise

        return success_response(self._render(order), status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders

        Only orders the caller may read are listed, newest first.
        ``?status=`` filters further; ``?page=`` / ``?limit=`` paginate.
        """
        try:
            principal = self._principal(request)
        except DomainError as exc:
            return domain_error_response(exc)

        queryset = self.filter_queryset(self._service.list_orders(principal))

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = OrderSerializer(
            page, many=True, context={"image_urls": self._image_urls(page)}
        )
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}"""
        try:
            principal = self._principal(request)
            order = self._service.get_order(principal, str(pk))
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(self._render(order))

    # ------------------------------------------------------------------
    # Workflow actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"])
    def assign(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/assign"""
        try:
            principal = self._principal(request)
            order = self._service.assign_order(principal, str(pk))
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(self._render(order))

    @action(detail=True, methods=["put"])
    def review(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/review  ``{action, price?, feedback?}``"""
        try:
            principal = self._principal(request)
            order = self._service.review_order(principal, str(pk), request.data)
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(self._render(order))

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/status  ``{status}``"""
        try:
            principal = self._principal(request)
            order = self._service.update_status(principal, str(pk), request.data)
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(self._render(order))

    @action(detail=True, methods=["post"])
    def reorder(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/reorder  ``{quantity}``"""
        try:
            principal = self._principal(request)
            order = self._service.reorder(principal, str(pk), request.data)
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(self._render(order), status.HTTP_201_CREATED)
