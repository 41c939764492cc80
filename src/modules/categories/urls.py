"""Category URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.categories.views import CategoryViewSet

router = DefaultRouter(trailing_slash=False)
router.register("categories", CategoryViewSet, basename="category")

urlpatterns = router.urls
