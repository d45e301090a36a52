"""
URL configuration for the timekeeper project.

The JSON endpoints live under their app prefixes; the admin is the data
entry surface for categories, goals and the achievement catalog.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("timer/", include("time_entries.urls")),
    path("dashboard/", include("dashboard.urls")),
    path("achievements/", include("achievements.urls")),
]
