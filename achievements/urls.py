from django.urls import path
from . import views

app_name = "achievements"

urlpatterns = [
    path("api/", views.achievements_api, name="achievements_api"),
]
