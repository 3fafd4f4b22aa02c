"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("api/plugins/", views.plugin_list, name="plugin_list"),
    path("api/plugins/stats/", views.plugin_stats, name="plugin_stats"),
    path("api/plugins/<str:plugin_id>/", views.plugin_detail, name="plugin_detail"),
    path("api/plugins/<str:plugin_id>/validate/", views.plugin_validate, name="plugin_validate"),
    path("api/plugins/<str:plugin_id>/preview/", views.plugin_preview, name="plugin_preview"),
]
