from django.urls import path

from .views import EmployeeDetailView, EmployeeListCreateView, MeView

urlpatterns = [
    path("me/", MeView.as_view(), name="accounts-me"),
    path("employees/", EmployeeListCreateView.as_view(), name="employee-list"),
    path("employees/<int:employee_id>/", EmployeeDetailView.as_view(), name="employee-detail"),
]
