# mr_core/common/management/commands/seed_demo.py

import datetime

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from mr_core.hospitals.models import Hospital
from mr_core.iam.models import UserProfile
from mr_core.patients.models import Patient
from mr_core.policy.types import Role

DEMO_HOSPITAL = {"name": "Demo General Hospital", "address": "Putalisadak", "district": "Kathmandu"}

# username, role, affiliated with the demo hospital
DEMO_USERS = [
    ("demo_admin", Role.ADMIN, False),
    ("demo_doctor", Role.DOCTOR, True),
    ("demo_nurse", Role.NURSE, True),
    ("demo_patient", Role.PATIENT, False),
]


class Command(BaseCommand):
    help = "Create a demo hospital and one user per role (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="demo12345", help="Password for newly created demo users.")

    @transaction.atomic
    def handle(self, *args, **options):
        hospital, _ = Hospital.objects.get_or_create(name=DEMO_HOSPITAL["name"], defaults=DEMO_HOSPITAL)

        User = get_user_model()
        created = 0
        for username, role, affiliated in DEMO_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(username=username, password=options["password"])
                created += 1
            UserProfile.objects.filter(user=user).update(role=role, hospital=hospital if affiliated else None)

            if role == Role.PATIENT:
                Patient.objects.get_or_create(
                    user=user,
                    defaults={"hospital": hospital, "date_of_birth": datetime.date(1990, 1, 1)},
                )

        self.stdout.write(self.style.SUCCESS(f"Demo data ensured. Newly created users: {created}"))
