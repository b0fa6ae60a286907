from django.core.management.base import BaseCommand

from accounts.models import Role


ROLES = {
    Role.Name.ADMIN: (Role.Level.ADMIN, "Company administrator"),
    Role.Name.HR_OFFICER: (Role.Level.HR_OFFICER, "Manages employees, leave allocation and attendance"),
    Role.Name.PAYROLL_OFFICER: (Role.Level.PAYROLL_OFFICER, "Manages salary structures and payruns"),
    Role.Name.EMPLOYEE: (Role.Level.EMPLOYEE, "Regular employee"),
}


class Command(BaseCommand):
    help = "Create or update the system roles"

    def handle(self, *args, **options):
        for name, (level, description) in ROLES.items():
            role, created = Role.objects.update_or_create(
                name=name,
                defaults={"level": level, "description": description},
            )
            verb = "Created" if created else "Updated"
            self.stdout.write(f"{verb} role {role.name} (level {role.level})")

        self.stdout.write(self.style.SUCCESS("Roles initialized"))
