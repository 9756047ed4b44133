from typing import Optional

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from storefront.errors.exceptions import Forbidden, Unauthorized
from storefront.models.user import User


class AuthService:
    """Resolves the caller from the JWT issued by the external auth service."""

    @staticmethod
    def get_current_identity() -> User:
        user = User.find_by_id(get_jwt_identity())
        if not user:
            raise Unauthorized(message="User not found")
        return user

    @staticmethod
    def get_optional_identity() -> Optional[User]:
        """Anonymous when no token is sent; a bad token is still rejected."""
        verify_jwt_in_request(optional=True)
        identity = get_jwt_identity()
        if identity is None:
            return None
        return User.find_by_id(identity)

    @staticmethod
    def ensure_owner_or_admin(user, owner_id):
        if user.is_admin or str(user.id) == str(owner_id):
            return
        raise Forbidden(message="Not authorized")
