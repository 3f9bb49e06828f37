from dataclasses import dataclass
from typing import Optional

from core.exceptions import AuthError


@dataclass(frozen=True)
class AuthContext:
    """Who is acting on a request. Passed explicitly into every service call."""
    role: str
    user_id: Optional[int]
    name: str
    distributor_id: Optional[int] = None

    @property
    def is_admin(self):
        return self.role == 'admin'

    def audit(self):
        """Fields stamped onto records as updated_by_*."""
        return {
            'updated_by_role': self.role,
            'updated_by_id': self.user_id,
            'updated_by_name': self.name,
        }


SYSTEM = AuthContext(role='system', user_id=None, name='system')


def resolve_auth_context(user):
    """Build the acting context from an authenticated user."""
    if user is None or not user.is_authenticated:
        raise AuthError('Authentication credentials were not provided.')
    return AuthContext(
        role=user.role,
        user_id=user.pk,
        name=user.display_name,
        distributor_id=user.distributor_id,
    )
