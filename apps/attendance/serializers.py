from rest_framework import serializers

from .models import Attendance, AttendanceSession


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100, required=False)
    month = serializers.IntegerField(min_value=1, max_value=12, required=False)


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class AttendanceSessionSerializer(serializers.ModelSerializer):
    class Meta:
        model = AttendanceSession
        fields = ("id", "check_in", "check_out")


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True)
    sessions = AttendanceSessionSerializer(many=True, read_only=True)

    class Meta:
        model = Attendance
        fields = (
            "id",
            "employee",
            "employee_name",
            "employee_code",
            "date",
            "status",
            "currently_checked_in",
            "check_in",
            "check_out",
            "working_hours",
            "remarks",
            "sessions",
        )


class AttendanceMarkSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=Attendance.Status.choices)
    remarks = serializers.CharField(required=False, allow_blank=True, default="")
