from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .access_policy import AccessPolicy
from .audit import EmployeeAuditService
from .models import Employee
from .permissions import IsCompanyMember
from .serializers import (
    EmployeeCreateSerializer,
    EmployeeSerializer,
    EmployeeUpdateSerializer,
    UserSerializer,
)


# ================= ME =================

class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        employee = AccessPolicy.employee_for(request.user)
        return Response(
            {
                "user": UserSerializer(request.user).data,
                "employee": EmployeeSerializer(employee).data if employee else None,
            }
        )


# ================= EMPLOYEES =================

class EmployeeListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        if not AccessPolicy.can_view_directory(request.user):
            raise PermissionDenied("Access denied.")

        qs = Employee.objects.filter(company_id=request.user.company_id).select_related("salary_structure")

        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
                | Q(employee_code__icontains=search)
            )

        is_active = request.query_params.get("is_active")
        if is_active is not None:
            qs = qs.filter(is_active=is_active.lower() == "true")

        return Response(EmployeeSerializer(qs, many=True).data)

    def post(self, request):
        if not AccessPolicy.can_manage_employees(request.user):
            raise PermissionDenied("Access denied.")

        serializer = EmployeeCreateSerializer(
            data=request.data,
            context={"company": request.user.company},
        )
        serializer.is_valid(raise_exception=True)
        employee = serializer.save()
        EmployeeAuditService.log_employee_created(request, employee)
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_201_CREATED)


class EmployeeDetailView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def _get_employee(self, request, employee_id):
        employee = get_object_or_404(
            Employee,
            id=employee_id,
            company_id=request.user.company_id,
        )
        if not AccessPolicy.can_view_employee(request.user, employee):
            raise PermissionDenied("Access denied.")
        return employee

    def get(self, request, employee_id: int):
        employee = self._get_employee(request, employee_id)
        return Response(EmployeeSerializer(employee).data)

    def patch(self, request, employee_id: int):
        employee = self._get_employee(request, employee_id)
        if not AccessPolicy.can_manage_employees(request.user):
            raise PermissionDenied("Access denied.")

        serializer = EmployeeUpdateSerializer(employee, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        EmployeeAuditService.log_employee_updated(request, employee, list(serializer.validated_data))
        return Response(EmployeeSerializer(employee).data)
