from django.urls import path
from . import views

app_name = "dashboard"

urlpatterns = [
    path("api/", views.dashboard_api, name="dashboard_api"),
    path("api/stats/", views.stats_api, name="stats_api"),
    path("api/calendar/", views.calendar_api, name="calendar_api"),
]
