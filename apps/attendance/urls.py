from django.urls import path

from .views import (
    CheckInAPIView,
    CheckOutAPIView,
    CompanyAttendanceAPIView,
    EmployeeAttendanceAPIView,
    MarkAttendanceAPIView,
    MyAttendanceAPIView,
    TodayAttendanceAPIView,
)

urlpatterns = [
    path("check-in/", CheckInAPIView.as_view(), name="attendance-check-in"),
    path("check-out/", CheckOutAPIView.as_view(), name="attendance-check-out"),
    path("my/", MyAttendanceAPIView.as_view(), name="attendance-my"),
    path("today/", TodayAttendanceAPIView.as_view(), name="attendance-today"),
    path("all/", CompanyAttendanceAPIView.as_view(), name="attendance-all"),
    path("employee/<int:employee_id>/", EmployeeAttendanceAPIView.as_view(), name="attendance-employee"),
    path("mark/", MarkAttendanceAPIView.as_view(), name="attendance-mark"),
]
