from django.apps import apps
from django.contrib.auth.models import UserManager as DjangoUserManager


class UserManager(DjangoUserManager):

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        Role = apps.get_model("accounts", "Role")
        admin_role, _ = Role.objects.get_or_create(
            name=Role.Name.ADMIN,
            defaults={
                "level": Role.Level.ADMIN,
                "description": "Company administrator",
            },
        )

        extra_fields["role"] = admin_role

        return super().create_superuser(username, email, password, **extra_fields)
