"""User profile URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.users.views import UserViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register("users", UserViewSet, basename="user")

urlpatterns = router.urls
