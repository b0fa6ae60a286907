from rest_framework import serializers

from .models import Leave, LeaveBalance, LeaveType


class LeaveSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True)
    approved_by = serializers.CharField(source="approved_by.username", read_only=True, default=None)

    class Meta:
        model = Leave
        fields = (
            "id",
            "employee",
            "employee_name",
            "employee_code",
            "leave_type",
            "subject",
            "description",
            "start_date",
            "end_date",
            "total_days",
            "status",
            "approved_by",
            "approved_at",
            "rejection_reason",
            "created_at",
        )


class LeaveApplySerializer(serializers.Serializer):
    leave_type = serializers.ChoiceField(choices=LeaveType.choices)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    subject = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class LeaveRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class LeaveFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Leave.Status.choices, required=False)
    leave_type = serializers.ChoiceField(choices=LeaveType.choices, required=False)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    employee_id = serializers.IntegerField(required=False)


class LeaveBalanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = LeaveBalance
        fields = ("id", "employee", "leave_type", "year", "total_days", "used_days", "remaining_days")


class LeaveAllocateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    leave_type = serializers.ChoiceField(choices=LeaveType.choices)
    total_days = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0)
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
