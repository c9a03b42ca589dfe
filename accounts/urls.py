from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import UserViewSet, initialize_data

router = SimpleRouter(trailing_slash=False)
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("init", initialize_data, name="init-data"),
] + router.urls
