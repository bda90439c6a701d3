"""Message API views under ``/api/v1/orders/{order_id}/messages``."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError
from modules.core.responses import domain_error_response, success_response
from modules.messaging.models import Message
from modules.messaging.repositories.django_repository import MessageDjangoRepository
from modules.messaging.serializers import MessageSerializer
from modules.messaging.services import MessageService
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.users.principal import PrincipalResolver
from modules.users.repositories.django_repository import UserProfileDjangoRepository


class OrderMessageViewSet(GenericViewSet):
    queryset = Message.objects.all()
    serializer_class = MessageSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = MessageService(
            message_repository=MessageDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )
        self._resolver = PrincipalResolver(UserProfileDjangoRepository())

    def list(self, request: Request, order_id: str | None = None) -> Response:
        """GET /api/v1/orders/{order_id}/messages"""
        try:
            principal = self._resolver.resolve(request.user)
            messages = self._service.list_messages(principal, str(order_id))
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(MessageSerializer(messages, many=True).data)

    def create(self, request: Request, order_id: str | None = None) -> Response:
        """POST /api/v1/orders/{order_id}/messages  ``{text}``"""
        try:
            principal = self._resolver.resolve(request.user)
            message = self._service.send_message(
                principal, str(order_id), request.data
            )
        except DomainError as exc:
            return domain_error_response(exc)
        return success_response(
            MessageSerializer(message).data, status.HTTP_201_CREATED
        )
