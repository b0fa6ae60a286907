from django.urls import path

from .views import (
    LeaveAllocateAPIView,
    LeaveApproveAPIView,
    LeaveBalanceAPIView,
    LeaveCancelAPIView,
    LeaveDetailAPIView,
    LeaveListCreateAPIView,
    LeaveRejectAPIView,
    MyLeavesAPIView,
)

urlpatterns = [
    path("", LeaveListCreateAPIView.as_view(), name="leave-list"),
    path("my/", MyLeavesAPIView.as_view(), name="leave-my"),
    path("allocate/", LeaveAllocateAPIView.as_view(), name="leave-allocate"),
    path("balance/<int:employee_id>/", LeaveBalanceAPIView.as_view(), name="leave-balance"),
    path("<int:leave_id>/", LeaveDetailAPIView.as_view(), name="leave-detail"),
    path("<int:leave_id>/approve/", LeaveApproveAPIView.as_view(), name="leave-approve"),
    path("<int:leave_id>/reject/", LeaveRejectAPIView.as_view(), name="leave-reject"),
    path("<int:leave_id>/cancel/", LeaveCancelAPIView.as_view(), name="leave-cancel"),
]
