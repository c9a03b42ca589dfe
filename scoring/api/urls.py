from django.urls import path
from .views import ResetProgressView, SessionListView, SimulateSessionView, StatsView

urlpatterns = [
    path("sessions", SessionListView.as_view(), name="sessions"),
    path("sessions/simulate", SimulateSessionView.as_view(), name="simulate-session"),
    path("users/me/stats", StatsView.as_view(), name="user-stats"),
    path("users/me/reset", ResetProgressView.as_view(), name="user-reset"),
]
