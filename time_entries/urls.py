from django.urls import path
from . import views

app_name = "time_entries"

urlpatterns = [
    path("start/", views.start_timer, name="start_timer"),
    path("stop/", views.stop_timer, name="stop_timer"),
    path("cancel/", views.cancel_timer, name="cancel_timer"),
    path("force-close-all/", views.force_close_all, name="force_close_all"),
    path("active/", views.active_timer, name="active_timer"),
    path("entries/", views.entries_for_date, name="entries_for_date"),
]
