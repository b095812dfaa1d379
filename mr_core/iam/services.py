# mr_core/iam/services.py
from __future__ import annotations

from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import ValidationError

from mr_core.audit.models import AuditAction
from mr_core.audit.services import AuditService
from mr_core.common.api.exceptions import ConflictError, InvalidStateTransition
from mr_core.common.lookups import get_or_not_found
from mr_core.hospitals.models import Hospital
from mr_core.iam.identity import ActorContext
from mr_core.iam.models import UserProfile
from mr_core.policy.guard import authorize
from mr_core.policy.types import STAFF_ROLES, Action, Resource, ResourceType, Role


def _user_resource(user_id: int | None = None) -> Resource:
    return Resource(type=ResourceType.USER, owner_user_id=user_id)


def _check_affiliation(role: str, hospital_id: UUID | None) -> Hospital | None:
    if role in STAFF_ROLES and hospital_id is None:
        raise ValidationError({"hospital_id": "Doctors and nurses must belong to a hospital."})
    if hospital_id is None:
        return None
    return get_or_not_found(Hospital.objects.all(), "Hospital not found.", id=hospital_id)


class UserService:
    @staticmethod
    @transaction.atomic
    def create_user(
        actor: ActorContext,
        *,
        username: str,
        password: str,
        role: str = Role.PATIENT,
        hospital_id: UUID | None = None,
        email: str = "",
        first_name: str = "",
        last_name: str = "",
        phone: str = "",
    ):
        authorize(actor.principal, Action.CREATE, _user_resource())
        hospital = _check_affiliation(role, hospital_id)

        User = get_user_model()
        if User.objects.filter(username=username).exists():
            raise ConflictError("A user with that username already exists.")

        user = User.objects.create_user(
            username=username,
            password=password,
            email=email or "",
            first_name=first_name or "",
            last_name=last_name or "",
        )
        # profile comes from the post_save signal
        profile = UserProfile.objects.select_for_update().get(user=user)
        profile.role = role
        profile.hospital = hospital
        profile.phone = phone or ""
        profile.save(update_fields=["role", "hospital", "phone", "updated_at"])

        AuditService.record(
            actor,
            action=AuditAction.CREATE_USER,
            resource_type=ResourceType.USER,
            resource_id=user.pk,
            details={"role": role, "hospital_id": hospital_id},
        )
        return user

    @staticmethod
    @transaction.atomic
    def update_role(actor: ActorContext, *, user_id: int, role: str, hospital_id: UUID | None = None) -> UserProfile:
        authorize(actor.principal, Action.UPDATE, _user_resource(user_id))
        if user_id == actor.user_id:
            raise ValidationError({"user_id": "You cannot change your own role."})

        profile = get_or_not_found(
            UserProfile.objects.select_for_update(),
            "User not found.",
            user_id=user_id,
        )
        hospital = _check_affiliation(role, hospital_id)

        previous = {"role": profile.role, "hospital_id": profile.hospital_id}
        profile.role = role
        profile.hospital = hospital
        profile.save(update_fields=["role", "hospital", "updated_at"])

        AuditService.record(
            actor,
            action=AuditAction.UPDATE_USER_ROLE,
            resource_type=ResourceType.USER,
            resource_id=user_id,
            details={
                "from": previous,
                "to": {"role": role, "hospital_id": hospital_id},
            },
        )
        return profile

    @staticmethod
    @transaction.atomic
    def deactivate(actor: ActorContext, *, user_id: int) -> UserProfile:
        """
        Users are never deleted; deactivation blocks login and identity resolution.
        """
        authorize(actor.principal, Action.UPDATE, _user_resource(user_id))
        if user_id == actor.user_id:
            raise ValidationError({"user_id": "You cannot deactivate yourself."})

        profile = get_or_not_found(
            UserProfile.objects.select_for_update().select_related("user"),
            "User not found.",
            user_id=user_id,
        )
        if not profile.is_active and not profile.user.is_active:
            raise InvalidStateTransition("User is already inactive.")

        profile.is_active = False
        profile.save(update_fields=["is_active", "updated_at"])
        profile.user.is_active = False
        profile.user.save(update_fields=["is_active"])

        AuditService.record(
            actor,
            action=AuditAction.DEACTIVATE_USER,
            resource_type=ResourceType.USER,
            resource_id=user_id,
        )
        return profile
