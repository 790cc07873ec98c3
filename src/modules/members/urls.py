"""Member URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.members.views import MemberViewSet

router = DefaultRouter(trailing_slash=True)
router.register("members", MemberViewSet, basename="member")

urlpatterns = router.urls
