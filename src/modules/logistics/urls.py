"""Logistics partner URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.logistics.views import LogisticsPartnerViewSet

router = DefaultRouter(trailing_slash=True)
router.register("logistics-partners", LogisticsPartnerViewSet, basename="logistics-partner")

urlpatterns = router.urls
