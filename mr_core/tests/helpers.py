# mr_core/tests/helpers.py
from django.contrib.auth import get_user_model

from mr_core.iam.identity import ActorContext
from mr_core.iam.models import UserProfile
from mr_core.patients.models import Patient
from mr_core.policy.types import Principal, Role

PASSWORD = "Pass@12345"


def make_user(username, role, hospital=None, **extra):
    """
    Create a user through Django (the post_save signal builds the profile),
    then set role + hospital the way an admin would.
    """
    user = get_user_model().objects.create_user(username=username, password=PASSWORD, **extra)
    UserProfile.objects.filter(user=user).update(role=role, hospital=hospital)
    return get_user_model().objects.get(pk=user.pk)


def actor_for(user, *, ip_address="10.0.0.1", user_agent="pytest") -> ActorContext:
    """
    The ActorContext a view would hand to a service for `user`.
    """
    profile = UserProfile.objects.get(user=user)
    patient_id = Patient.objects.filter(user=user).values_list("id", flat=True).first()
    principal = Principal(
        user_id=user.pk,
        role=Role(profile.role),
        hospital_id=profile.hospital_id,
        patient_id=patient_id,
    )
    return ActorContext(principal=principal, ip_address=ip_address, user_agent=user_agent)


def error_code(res) -> str:
    return res.json()["error"]["code"]
