"""Branch and staff URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.branches.views import BranchViewSet, StaffViewSet

router = DefaultRouter(trailing_slash=True)
router.register("branches", BranchViewSet, basename="branch")
router.register("staff", StaffViewSet, basename="staff")

urlpatterns = router.urls
