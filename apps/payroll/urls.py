from django.urls import path

from .views import (
    MyPayslipsAPIView,
    PayrunAPIView,
    PayslipCancelAPIView,
    PayslipDetailAPIView,
    PayslipGenerateAPIView,
    PayslipListAPIView,
    PayslipValidateAPIView,
    SalaryStructureAPIView,
)

urlpatterns = [
    path("payrun/", PayrunAPIView.as_view(), name="payroll-payrun"),
    path("payslips/", PayslipListAPIView.as_view(), name="payroll-payslips"),
    path("payslips/generate/", PayslipGenerateAPIView.as_view(), name="payroll-payslip-generate"),
    path("payslips/<int:payslip_id>/", PayslipDetailAPIView.as_view(), name="payroll-payslip-detail"),
    path("payslips/<int:payslip_id>/validate/", PayslipValidateAPIView.as_view(), name="payroll-payslip-validate"),
    path("payslips/<int:payslip_id>/cancel/", PayslipCancelAPIView.as_view(), name="payroll-payslip-cancel"),
    path("my-payslips/", MyPayslipsAPIView.as_view(), name="payroll-my-payslips"),
    path("employees/<int:employee_id>/salary/", SalaryStructureAPIView.as_view(), name="payroll-salary-structure"),
]
