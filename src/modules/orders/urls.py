"""Order URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
