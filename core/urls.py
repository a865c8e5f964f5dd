"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.index, name="index"),
    path("visualizer/", views.visualizer, name="visualizer"),
    path("visualizer/sample/", views.visualizer_sample, name="visualizer_sample"),
    path("visualizer/reset/", views.visualizer_reset, name="visualizer_reset"),
    path("api/chart-data/", views.chart_data_api, name="chart_data_api"),
    path("refine/", views.refine_data, name="refine_data"),
    path("refine/sample/", views.refine_sample, name="refine_sample"),
    path("refine/export.csv", views.export_refined_csv, name="export_refined_csv"),
    path("samples/<slug:slug>/", views.sample_file, name="sample_file"),
]
