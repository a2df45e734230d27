# hr_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from hr_core.employees.api.views import EmployeeViewSet
from hr_core.iam.api.auth import LoginView, LogoutView, RefreshView
from hr_core.iam.api.me import MeView
from hr_core.revisions.api.views import EmployeeRevisionViewSet, RevisionFeedViewSet

router = DefaultRouter()

router.register(r"employees", EmployeeViewSet, basename="employees")
router.register(
    r"employees/(?P<employee_id>[^/.]+)/revisions",
    EmployeeRevisionViewSet,
    basename="employee-revisions",
)
router.register(r"revisions", RevisionFeedViewSet, basename="revisions")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
