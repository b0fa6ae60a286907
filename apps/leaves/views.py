from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.access_policy import current_employee
from accounts.models import Employee
from accounts.permissions import IsCompanyMember
from common.clock import get_clock

from .audit import LeaveAuditService
from .models import Leave, LeaveBalance
from .policies import LeavePolicy
from .serializers import (
    LeaveAllocateSerializer,
    LeaveApplySerializer,
    LeaveBalanceSerializer,
    LeaveFilterSerializer,
    LeaveRejectSerializer,
    LeaveSerializer,
)
from .services import LeaveService


def _filtered(qs, params):
    query = LeaveFilterSerializer(data=params)
    query.is_valid(raise_exception=True)
    data = query.validated_data
    if data.get("status"):
        qs = qs.filter(status=data["status"])
    if data.get("leave_type"):
        qs = qs.filter(leave_type=data["leave_type"])
    if data.get("year"):
        qs = qs.filter(start_date__year=data["year"])
    if data.get("employee_id"):
        qs = qs.filter(employee_id=data["employee_id"])
    return qs


class LeaveListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        if not LeavePolicy.can_review(request.user):
            raise PermissionDenied("Access denied.")
        qs = Leave.objects.filter(employee__company_id=request.user.company_id).select_related(
            "employee", "approved_by"
        )
        return Response(LeaveSerializer(_filtered(qs, request.query_params), many=True).data)

    @extend_schema(request=LeaveApplySerializer, responses={201: LeaveSerializer})
    def post(self, request):
        employee = current_employee(request.user)
        serializer = LeaveApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        leave = LeaveService.apply(employee=employee, **serializer.validated_data)
        LeaveAuditService.log_applied(request, leave)
        return Response(LeaveSerializer(leave).data, status=status.HTTP_201_CREATED)


class MyLeavesAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        employee = current_employee(request.user)
        qs = Leave.objects.filter(employee=employee).select_related("employee", "approved_by")
        balances = LeaveBalance.objects.filter(employee=employee, year=get_clock().today().year)
        return Response(
            {
                "leaves": LeaveSerializer(_filtered(qs, request.query_params), many=True).data,
                "balances": LeaveBalanceSerializer(balances, many=True).data,
            }
        )


class LeaveDetailAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request, leave_id: int):
        leave = get_object_or_404(
            Leave.objects.select_related("employee", "approved_by"),
            id=leave_id,
            employee__company_id=request.user.company_id,
        )
        if not LeavePolicy.can_view_leave(request.user, leave):
            raise PermissionDenied("Access denied.")
        return Response(LeaveSerializer(leave).data)


class LeaveApproveAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def put(self, request, leave_id: int):
        if not LeavePolicy.can_review(request.user):
            raise PermissionDenied("Access denied.")
        leave = LeaveService.approve(
            leave_id=leave_id,
            company_id=request.user.company_id,
            approver=request.user,
        )
        LeaveAuditService.log_approved(request, leave)
        return Response(LeaveSerializer(leave).data)


class LeaveRejectAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def put(self, request, leave_id: int):
        if not LeavePolicy.can_review(request.user):
            raise PermissionDenied("Access denied.")
        serializer = LeaveRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leave = LeaveService.reject(
            leave_id=leave_id,
            company_id=request.user.company_id,
            approver=request.user,
            reason=serializer.validated_data["reason"],
        )
        LeaveAuditService.log_rejected(request, leave)
        return Response(LeaveSerializer(leave).data)


class LeaveCancelAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def put(self, request, leave_id: int):
        employee = current_employee(request.user)
        leave = LeaveService.cancel(leave_id=leave_id, employee=employee)
        LeaveAuditService.log_cancelled(request, leave)
        return Response(LeaveSerializer(leave).data)


class LeaveAllocateAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    @extend_schema(request=LeaveAllocateSerializer, responses={200: LeaveBalanceSerializer})
    def post(self, request):
        if not LeavePolicy.can_allocate(request.user):
            raise PermissionDenied("Access denied.")
        serializer = LeaveAllocateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        employee = get_object_or_404(Employee, id=data["employee_id"], company_id=request.user.company_id)
        balance = LeaveService.allocate(
            employee=employee,
            leave_type=data["leave_type"],
            total_days=data["total_days"],
            year=data.get("year") or get_clock().today().year,
        )
        LeaveAuditService.log_allocated(request, balance)
        return Response(LeaveBalanceSerializer(balance).data)


class LeaveBalanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request, employee_id: int):
        employee = get_object_or_404(Employee, id=employee_id, company_id=request.user.company_id)
        if not LeavePolicy.can_view_balance(request.user, employee):
            raise PermissionDenied("Access denied.")
        year = request.query_params.get("year")
        year = int(year) if year and year.isdigit() else get_clock().today().year
        balances = LeaveBalance.objects.filter(employee=employee, year=year)
        return Response({"year": year, "balances": LeaveBalanceSerializer(balances, many=True).data})
