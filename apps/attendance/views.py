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
from common.periods import month_date_range, month_index_from_number

from .audit import AttendanceAuditService
from .models import Attendance
from .policies import AttendancePolicy
from .serializers import (
    AttendanceMarkSerializer,
    AttendanceSerializer,
    DayQuerySerializer,
    MonthQuerySerializer,
)
from .services import AttendanceService


def _month_records(request, employee):
    query = MonthQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    today = get_clock().today()
    year = query.validated_data.get("year", today.year)
    month = query.validated_data.get("month", today.month)

    period = month_date_range(year, month_index_from_number(month))
    records = (
        Attendance.objects.filter(employee=employee, date__range=(period.start, period.end))
        .select_related("employee")
        .prefetch_related("sessions")
        .order_by("date")
    )
    return {
        "year": year,
        "month": month,
        "records": AttendanceSerializer(records, many=True).data,
        "statistics": AttendanceService.statistics(records).as_dict(),
    }


class CheckInAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    @extend_schema(description="Open a new work session for today.", responses={201: AttendanceSerializer})
    def post(self, request):
        employee = current_employee(request.user)
        attendance = AttendanceService.check_in(employee=employee)
        AttendanceAuditService.log_checked_in(request, attendance)
        return Response(AttendanceSerializer(attendance).data, status=status.HTTP_201_CREATED)


class CheckOutAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    @extend_schema(description="Close the open work session for today.", responses={200: AttendanceSerializer})
    def post(self, request):
        employee = current_employee(request.user)
        attendance = AttendanceService.check_out(employee=employee)
        AttendanceAuditService.log_checked_out(request, attendance)
        return Response(AttendanceSerializer(attendance).data)


class MyAttendanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        employee = current_employee(request.user)
        return Response(_month_records(request, employee))


class TodayAttendanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        employee = current_employee(request.user)
        today = AttendanceService.today_status(employee=employee)
        attendance = today["attendance"]
        leave = today["leave"]
        return Response(
            {
                "date": today["date"],
                "status": today["status"],
                "attendance": AttendanceSerializer(attendance).data if attendance else None,
                "leave": (
                    {"id": leave.id, "leave_type": leave.leave_type, "start_date": leave.start_date, "end_date": leave.end_date}
                    if leave
                    else None
                ),
                "can_check_in": today["can_check_in"],
                "can_check_out": today["can_check_out"],
            }
        )


class CompanyAttendanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        if not AttendancePolicy.can_view_all(request.user):
            raise PermissionDenied("Access denied.")

        query = DayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        day = query.validated_data.get("date") or get_clock().today()

        employees = Employee.objects.filter(company_id=request.user.company_id, is_active=True)
        records = (
            Attendance.objects.filter(employee__in=employees, date=day)
            .select_related("employee")
            .prefetch_related("sessions")
        )
        by_status = {choice: 0 for choice in Attendance.Status.values}
        for record in records:
            by_status[record.status] += 1

        total_employees = employees.count()
        return Response(
            {
                "date": day,
                "records": AttendanceSerializer(records, many=True).data,
                "summary": {
                    "total_employees": total_employees,
                    "present": by_status[Attendance.Status.PRESENT],
                    "half_day": by_status[Attendance.Status.HALF_DAY],
                    "on_leave": by_status[Attendance.Status.ON_LEAVE],
                    "absent": total_employees - len(records) + by_status[Attendance.Status.ABSENT],
                },
            }
        )


class EmployeeAttendanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request, employee_id: int):
        employee = get_object_or_404(Employee, id=employee_id, company_id=request.user.company_id)
        if not AttendancePolicy.can_view_employee(request.user, employee):
            raise PermissionDenied("Access denied.")
        return Response(_month_records(request, employee))


class MarkAttendanceAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def post(self, request):
        if not AttendancePolicy.can_mark(request.user):
            raise PermissionDenied("Access denied.")

        serializer = AttendanceMarkSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        employee = get_object_or_404(Employee, id=data["employee_id"], company_id=request.user.company_id)
        attendance, created = AttendanceService.mark(
            employee=employee,
            day=data["date"],
            status=data["status"],
            remarks=data["remarks"],
        )
        AttendanceAuditService.log_marked(request, attendance, created)
        return Response(
            AttendanceSerializer(attendance).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
