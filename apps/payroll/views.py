from decimal import Decimal

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
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
from common.periods import month_index_from_number

from .audit import PayrollAuditService
from .exceptions import PayslipNotFound
from .lifecycle import PayslipLifecycle
from .models import Payslip, SalaryStructure
from .permissions import IsPayrollManager
from .policies import PayrollPolicy
from .serializers import (
    PayrunSerializer,
    PayslipFilterSerializer,
    PayslipGenerateSerializer,
    PayslipSerializer,
    SalaryStructureSerializer,
    SalaryStructureWriteSerializer,
)
from .services import PayrollService, SalaryStructureService

MONEY_ZERO = Value(Decimal("0.00"), output_field=DecimalField(max_digits=14, decimal_places=2))


def _payslips_for(request):
    return Payslip.objects.filter(employee__company_id=request.user.company_id).select_related("employee")


def _statistics(qs) -> dict:
    return qs.aggregate(
        total=Count("id"),
        total_employee_cost=Coalesce(Sum("employee_cost"), MONEY_ZERO),
        total_basic=Coalesce(Sum("basic_wage"), MONEY_ZERO),
        total_gross=Coalesce(Sum("gross_wage"), MONEY_ZERO),
        total_net=Coalesce(Sum("net_wage"), MONEY_ZERO),
        draft_count=Count("id", filter=Q(status=Payslip.Status.DRAFT)),
        done_count=Count("id", filter=Q(status=Payslip.Status.DONE)),
    )


class PayrollManagerAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember, IsPayrollManager]

    def permission_denied(self, request, message=None, code=None):
        if request.user and request.user.is_authenticated:
            PayrollAuditService.log_access_denied(request, reason=str(message or "forbidden"))
        super().permission_denied(request, message=message, code=code)


class PayrunAPIView(PayrollManagerAPIView):
    @extend_schema(request=PayrunSerializer)
    def post(self, request):
        serializer = PayrunSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        year = serializer.validated_data["year"]
        month = serializer.validated_data["month"]

        result = PayrollService.generate_payrun(
            company_id=request.user.company_id,
            year=year,
            month_index=month_index_from_number(month),
        )
        PayrollAuditService.log_payrun_generated(request, result)

        body = {
            "year": year,
            "month": month,
            "payslips": PayslipSerializer(result.succeeded, many=True).data,
            "total": len(result.succeeded),
        }
        if result.failed:
            body["errors"] = [failure.as_dict() for failure in result.failed]
        return Response(body, status=status.HTTP_201_CREATED)


class PayslipListAPIView(PayrollManagerAPIView):
    def get(self, request):
        query = PayslipFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        qs = _payslips_for(request).prefetch_related("components")
        if data.get("year"):
            qs = qs.filter(period_start__year=data["year"])
        if data.get("month"):
            qs = qs.filter(period_start__month=data["month"])
        if data.get("status"):
            qs = qs.filter(status=data["status"])
        if data.get("employee_id"):
            qs = qs.filter(employee_id=data["employee_id"])

        return Response(
            {
                "payslips": PayslipSerializer(qs, many=True).data,
                "statistics": _statistics(qs),
            },
            status=status.HTTP_200_OK,
        )


class PayslipGenerateAPIView(PayrollManagerAPIView):
    @extend_schema(request=PayslipGenerateSerializer, responses={201: PayslipSerializer})
    def post(self, request):
        serializer = PayslipGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payslip = PayrollService.generate_for_employee_id(
            company_id=request.user.company_id,
            employee_id=data["employee_id"],
            year=data["year"],
            month_index=month_index_from_number(data["month"]),
        )
        PayrollAuditService.log_payslip_generated(request, payslip)
        return Response(PayslipSerializer(payslip).data, status=status.HTTP_201_CREATED)


class PayslipDetailAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request, payslip_id: int):
        payslip = _payslips_for(request).prefetch_related("components").filter(id=payslip_id).first()
        if payslip is None:
            raise PayslipNotFound()
        if not PayrollPolicy.can_view_payslip(request.user, payslip):
            PayrollAuditService.log_access_denied(request, reason="payslip_not_owned")
            raise PermissionDenied("Access denied.")
        return Response(PayslipSerializer(payslip).data, status=status.HTTP_200_OK)

    def delete(self, request, payslip_id: int):
        if not PayrollPolicy.can_manage_payroll(request.user):
            PayrollAuditService.log_access_denied(request, reason="not_payroll_manager")
            raise PermissionDenied("Access denied.")
        payslip = PayslipLifecycle.delete(payslip_id, company_id=request.user.company_id)
        PayrollAuditService.log_payslip_deleted(request, payslip)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PayslipValidateAPIView(PayrollManagerAPIView):
    def put(self, request, payslip_id: int):
        payslip = PayslipLifecycle.validate(payslip_id, company_id=request.user.company_id)
        PayrollAuditService.log_payslip_validated(request, payslip)
        return Response(PayslipSerializer(payslip).data, status=status.HTTP_200_OK)


class PayslipCancelAPIView(PayrollManagerAPIView):
    def put(self, request, payslip_id: int):
        payslip = PayslipLifecycle.cancel(payslip_id, company_id=request.user.company_id)
        PayrollAuditService.log_payslip_cancelled(request, payslip)
        return Response(PayslipSerializer(payslip).data, status=status.HTTP_200_OK)


class MyPayslipsAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def get(self, request):
        employee = current_employee(request.user)
        qs = Payslip.objects.filter(employee=employee).select_related("employee").prefetch_related("components")
        year = request.query_params.get("year")
        if year and year.isdigit():
            qs = qs.filter(period_start__year=int(year))
        return Response(PayslipSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class SalaryStructureAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCompanyMember]

    def _employee(self, request, employee_id: int) -> Employee:
        return get_object_or_404(Employee, id=employee_id, company_id=request.user.company_id)

    def get(self, request, employee_id: int):
        employee = self._employee(request, employee_id)
        if not PayrollPolicy.can_view_employee_payroll(request.user, employee):
            PayrollAuditService.log_access_denied(request, reason="salary_not_owned")
            raise PermissionDenied("Access denied.")
        structure = get_object_or_404(
            SalaryStructure.objects.select_related("employee").prefetch_related("components"),
            employee=employee,
        )
        return Response(SalaryStructureSerializer(structure).data, status=status.HTTP_200_OK)

    @extend_schema(request=SalaryStructureWriteSerializer, responses={200: SalaryStructureSerializer})
    def put(self, request, employee_id: int):
        if not PayrollPolicy.can_manage_payroll(request.user):
            PayrollAuditService.log_access_denied(request, reason="not_payroll_manager")
            raise PermissionDenied("Access denied.")
        employee = self._employee(request, employee_id)
        serializer = SalaryStructureWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        structure = SalaryStructureService.save_structure(
            employee=employee,
            wage=data["wage"],
            pf_rate=data.get("pf_rate"),
            professional_tax=data.get("professional_tax"),
            components=[dict(item) for item in data["components"]],
        )
        PayrollAuditService.log_salary_structure_updated(request, structure)
        structure = SalaryStructure.objects.prefetch_related("components").select_related("employee").get(id=structure.id)
        return Response(SalaryStructureSerializer(structure).data, status=status.HTTP_200_OK)
