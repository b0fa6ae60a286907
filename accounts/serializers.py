from rest_framework import serializers

from .models import Employee, User


# =========================
# USER SERIALIZER (READ)
# =========================

class UserSerializer(serializers.ModelSerializer):
    role = serializers.CharField(source="role.name", read_only=True)
    role_level = serializers.IntegerField(source="role.level", read_only=True)
    company = serializers.CharField(source="company.name", read_only=True, default=None)
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "role",
            "role_level",
            "company",
            "phone",
        )

    def get_full_name(self, obj):
        return f"{obj.first_name} {obj.last_name}".strip()


# =========================
# EMPLOYEE DIRECTORY
# =========================

class EmployeeSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    has_salary_structure = serializers.SerializerMethodField()

    class Meta:
        model = Employee
        fields = (
            "id",
            "employee_code",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "department",
            "job_position",
            "date_of_joining",
            "is_active",
            "has_salary_structure",
            "created_at",
        )

    def get_has_salary_structure(self, obj):
        return hasattr(obj, "salary_structure")


class EmployeeCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = (
            "employee_code",
            "first_name",
            "last_name",
            "email",
            "phone",
            "department",
            "job_position",
            "date_of_joining",
        )

    def validate_employee_code(self, value):
        company = self.context["company"]
        if Employee.objects.filter(company=company, employee_code=value).exists():
            raise serializers.ValidationError("Employee code already exists in this company.")
        return value

    def create(self, validated_data):
        return Employee.objects.create(company=self.context["company"], **validated_data)


class EmployeeUpdateSerializer(serializers.ModelSerializer):
    """Partial update; anything outside ``fields`` is dropped."""

    class Meta:
        model = Employee
        fields = (
            "first_name",
            "last_name",
            "email",
            "phone",
            "department",
            "job_position",
            "date_of_joining",
            "bank_name",
            "account_number",
            "ifsc_code",
            "pan_number",
            "uan_number",
            "is_active",
        )
