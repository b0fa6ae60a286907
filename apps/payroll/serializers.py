from rest_framework import serializers

from .models import Payslip, PayslipComponent, SalaryComponent, SalaryStructure


class MonthYearSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class PayrunSerializer(MonthYearSerializer):
    pass


class PayslipGenerateSerializer(MonthYearSerializer):
    employee_id = serializers.IntegerField(min_value=1)


class PayslipFilterSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)
    status = serializers.ChoiceField(choices=Payslip.Status.choices, required=False)
    employee_id = serializers.IntegerField(required=False)

    def validate(self, attrs):
        if "month" in attrs and "year" not in attrs:
            raise serializers.ValidationError({"year": "year is required when month is given."})
        return attrs


class SalaryComponentWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    computation_type = serializers.ChoiceField(choices=SalaryComponent.ComputationType.choices)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class SalaryStructureWriteSerializer(serializers.Serializer):
    wage = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    pf_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, required=False, allow_null=True)
    professional_tax = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    components = SalaryComponentWriteSerializer(many=True)


class SalaryComponentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalaryComponent
        fields = ("id", "name", "computation_type", "value", "amount", "order")


class SalaryStructureSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    components = SalaryComponentSerializer(many=True, read_only=True)

    class Meta:
        model = SalaryStructure
        fields = (
            "id",
            "employee",
            "employee_name",
            "wage",
            "pf_rate",
            "professional_tax",
            "components",
            "updated_at",
        )


class PayslipComponentSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayslipComponent
        fields = ("name", "rate_percent", "amount", "is_deduction", "order")


class PayslipSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True)
    components = PayslipComponentSerializer(many=True, read_only=True)

    class Meta:
        model = Payslip
        fields = (
            "id",
            "employee",
            "employee_name",
            "employee_code",
            "pay_period",
            "period_start",
            "period_end",
            "working_days",
            "worked_days",
            "paid_leave_days",
            "unpaid_leave_days",
            "basic_wage",
            "gross_wage",
            "total_deductions",
            "net_wage",
            "employee_cost",
            "status",
            "validated_at",
            "cancelled_at",
            "components",
            "created_at",
        )
