# mr_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


class PrincipalRequired(BasePermission):
    """
    Default gate for every endpoint: the caller must be authenticated AND
    resolve to an active principal (see mr_core.iam.identity).

    Role and scope rules are not checked here; services call the policy.
    """
    message = "Authentication required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            # DRF turns this into 401/403 not_authenticated
            return False

        from mr_core.iam.identity import require_principal

        require_principal(request)
        return True
