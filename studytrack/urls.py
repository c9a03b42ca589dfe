from django.urls import include, path

urlpatterns = [
    path("api/", include("accounts.urls")),
    path("api/", include("scheduler.api.urls")),
    path("api/", include("scoring.api.urls")),
]
