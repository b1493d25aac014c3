# ==============================================================================
# CONTROL DE ACCESO
# ==============================================================================
# Decisiones de autorización como funciones puras sobre UserRole.
# Los decoradores de rutas (main.py) solo llaman a estas funciones.
# ==============================================================================

from dataclasses import dataclass
from typing import Iterable

from app_shop.models import UserRole
from app_shop.services.errors import ForbiddenError


@dataclass(frozen=True)
class Caller:
    """Identidad del usuario autenticado en la petición actual."""
    id: int
    role: UserRole
    name: str = ''
    email: str = ''

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def authorize(role: UserRole, allowed_roles: Iterable[UserRole]) -> bool:
    """
    Decide si un rol puede acceder a un recurso.

    Args:
        role: Rol del usuario
        allowed_roles: Roles permitidos para el recurso

    Returns:
        True si está permitido
    """
    return role in tuple(allowed_roles)


def require_role(role: UserRole, allowed_roles: Iterable[UserRole]) -> None:
    """
    Igual que authorize() pero lanza ForbiddenError si no está permitido.
    """
    if not authorize(role, allowed_roles):
        raise ForbiddenError(
            f"User role {role.value} is not authorized to access this route"
        )


def can_view_order(caller: Caller, owner_id: int) -> bool:
    """Un admin ve cualquier pedido; un cliente solo los suyos."""
    return caller.is_admin or caller.id == owner_id
