# mr_core/iam/signals.py
from __future__ import annotations

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from mr_core.iam.models import UserProfile
from mr_core.policy.types import Role


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="iam.ensure_user_profile")
def ensure_user_profile(sender, instance, created, raw=False, **kwargs):
    """
    Every user gets a profile on creation: admin for superusers, patient otherwise.
    """
    if not created or raw:
        return
    UserProfile.objects.get_or_create(
        user=instance,
        defaults={"role": Role.ADMIN if instance.is_superuser else Role.PATIENT},
    )
