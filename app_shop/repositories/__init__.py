# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (archivos JSON).
# Las interfaces (métodos públicos) no dependen del almacenamiento.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos/Interfaces (contratos)
# ├── base.py                → Clases base (DictRepository, ListRepository, RecordRepository)
# ├── product_repository.py  → Acceso a products.json
# ├── order_repository.py    → Acceso a orders.json
# ├── user_repository.py     → Acceso a users.json
# └── audit_repository.py    → Acceso a audit.json
# ==============================================================================

# Interfaces
from .interfaces import (
    IProductRepository,
    IOrderRepository,
    IUserRepository,
    IAuditRepository,
)

# Implementaciones concretas (JSON)
from .base import BaseRepository, DictRepository, ListRepository, RecordRepository
from .product_repository import ProductRepository
from .order_repository import OrderRepository
from .user_repository import UserRepository
from .audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'IProductRepository',
    'IOrderRepository',
    'IUserRepository',
    'IAuditRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',
    'RecordRepository',

    # Implementaciones JSON
    'ProductRepository',
    'OrderRepository',
    'UserRepository',
    'AuditRepository',
]
