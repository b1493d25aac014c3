# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y validaciones ANTES de escribir
# 3. Las rutas solo llaman a servicios
# 4. Los errores se lanzan como excepciones de services/errors.py
#
# ESTRUCTURA:
# ├── errors.py          → Taxonomía de errores (con código HTTP)
# ├── validators.py      → Validaciones puras de entrada
# ├── access.py          → Roles y autorización
# ├── product_service.py → Catálogo, stock, alertas de stock bajo
# ├── order_service.py   → Pedidos, consultas, estados
# ├── user_service.py    → Registro, login, tokens
# └── audit_service.py   → Logs de actividad
# ==============================================================================

from app_shop.services.errors import (
    ShopError,
    InvalidInputError,
    InsufficientStockError,
    ConflictError,
    UnauthenticatedError,
    ForbiddenError,
    NotFoundError,
)
from app_shop.services.access import Caller, authorize, require_role, can_view_order
from app_shop.services.audit_service import AuditService
from app_shop.services.product_service import ProductService
from app_shop.services.order_service import OrderService
from app_shop.services.user_service import UserService

__all__ = [
    'ShopError',
    'InvalidInputError',
    'InsufficientStockError',
    'ConflictError',
    'UnauthenticatedError',
    'ForbiddenError',
    'NotFoundError',
    'Caller',
    'authorize',
    'require_role',
    'can_view_order',
    'AuditService',
    'ProductService',
    'OrderService',
    'UserService',
]
