# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define todas las entidades del dominio usando dataclasses.
# Beneficios:
#   - Type hints para mejor documentación y autocompletado
#   - Fácil serialización/deserialización para JSON
#   - Independiente del mecanismo de persistencia
# ==============================================================================

from .entities import (
    # Usuarios
    User,
    UserRole,

    # Catálogo
    Product,
    DEFAULT_LOW_STOCK_THRESHOLD,

    # Pedidos
    Order,
    OrderItem,
    OrderStatus,

    # Auditoría
    AuditLog,
    AuditType,

    utc_now,
)

__all__ = [
    # Usuarios
    'User',
    'UserRole',

    # Catálogo
    'Product',
    'DEFAULT_LOW_STOCK_THRESHOLD',

    # Pedidos
    'Order',
    'OrderItem',
    'OrderStatus',

    # Auditoría
    'AuditLog',
    'AuditType',

    'utc_now',
]
