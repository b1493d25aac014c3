# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de la tienda.
# Diseñadas para ser independientes del mecanismo de persistencia.
# Los nombres de campo en to_dict() son los del formato JSON de la API.
# ==============================================================================

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum
from datetime import datetime, timezone


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class UserRole(str, Enum):
    """Roles de usuario disponibles en el sistema."""
    CUSTOMER = "customer"
    ADMIN = "admin"


class OrderStatus(str, Enum):
    """Estados posibles de un pedido (sin grafo de transiciones)."""
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class AuditType(str, Enum):
    """Tipos de eventos de auditoría."""
    PRODUCT = "PRODUCT"
    STOCK = "STOCK"
    ORDER = "ORDER"
    USER = "USER"


# Umbral de stock bajo por defecto
DEFAULT_LOW_STOCK_THRESHOLD = 5


def utc_now() -> str:
    """Timestamp ISO-8601 en UTC para createdAt/updatedAt."""
    return datetime.now(timezone.utc).isoformat()


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass
class User:
    """
    Representa un usuario del sistema (cliente o administrador).

    Attributes:
        id: Identificador único
        name: Nombre visible
        email: Correo (único, se guarda en minúsculas)
        password_hash: Hash de la contraseña (nunca almacenar en texto plano)
        role: Rol del usuario que define sus permisos
    """
    id: int
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.CUSTOMER
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, user_id: int, data: Dict[str, Any]) -> 'User':
        """Crea instancia desde diccionario."""
        try:
            role = UserRole(data.get('role', 'customer'))
        except ValueError:
            role = UserRole.CUSTOMER
        return cls(
            id=user_id,
            name=data.get('name', ''),
            email=data.get('email', ''),
            password_hash=data.get('password', ''),
            role=role,
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )


# ==============================================================================
# ENTIDADES DE CATÁLOGO
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador único del producto
        name: Nombre (único)
        description: Descripción
        price: Precio actual (no negativo)
        stock: Unidades disponibles (nunca negativo)
        low_stock_threshold: Stock mínimo antes de alerta
    """
    id: int
    name: str
    description: str
    price: float
    stock: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        """True si el stock cayó al umbral o por debajo."""
        return self.stock <= self.low_stock_threshold

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'stock': self.stock,
            'lowStockThreshold': self.low_stock_threshold,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        d = self.to_dict()
        return {'_id': self.id, **d}

    @classmethod
    def from_dict(cls, product_id: int, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario."""
        return cls(
            id=product_id,
            name=data.get('name', ''),
            description=data.get('description', ''),
            price=data.get('price', 0),
            stock=data.get('stock', 0),
            low_stock_threshold=data.get('lowStockThreshold', DEFAULT_LOW_STOCK_THRESHOLD),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )


# ==============================================================================
# ENTIDADES DE PEDIDOS
# ==============================================================================

@dataclass
class OrderItem:
    """
    Línea de un pedido.
    El precio es una copia del precio del producto al momento de la compra,
    NO una referencia viva.

    Attributes:
        product: ID del producto referenciado
        quantity: Cantidad pedida (entero positivo)
        price: Precio unitario congelado
    """
    product: int
    quantity: int
    price: float = 0.0

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product': self.product,
            'quantity': self.quantity,
            'price': self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrderItem':
        return cls(
            product=data.get('product'),
            quantity=data.get('quantity', 0),
            price=data.get('price', 0.0),
        )


@dataclass
class Order:
    """
    Pedido de un cliente.
    Es dueño exclusivo de sus líneas (embebidas, sin ID propio).

    Attributes:
        id: Identificador único del pedido
        user: ID del usuario dueño
        order_items: Líneas del pedido en el orden recibido
        total_price: Total calculado al crear el pedido
        status: Estado actual
    """
    id: int
    user: int
    order_items: List[OrderItem] = field(default_factory=list)
    total_price: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'user': self.user,
            'orderItems': [item.to_dict() for item in self.order_items],
            'totalPrice': self.total_price,
            'status': self.status.value if isinstance(self.status, Enum) else self.status,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        return {'_id': self.id, **self.to_dict()}

    @classmethod
    def from_dict(cls, order_id: int, data: Dict[str, Any]) -> 'Order':
        """Crea instancia desde diccionario."""
        items = [OrderItem.from_dict(i) for i in data.get('orderItems', [])]
        try:
            status = OrderStatus(data.get('status', 'Pending'))
        except ValueError:
            status = OrderStatus.PENDING
        return cls(
            id=order_id,
            user=data.get('user'),
            order_items=items,
            total_price=data.get('totalPrice', 0.0),
            status=status,
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
        )


# ==============================================================================
# AUDITORÍA
# ==============================================================================

@dataclass
class AuditLog:
    """
    Registro de auditoría.

    Attributes:
        type: Tipo de evento
        user: Usuario que realizó la acción
        message: Mensaje humanizado
        timestamp: Fecha y hora
        related_id: ID relacionado (producto, pedido, usuario)
        details: Detalles adicionales
    """
    type: AuditType
    user: str
    message: str
    timestamp: str = ''
    related_id: str = ''
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditLog':
        try:
            log_type = AuditType(data.get('type', 'PRODUCT'))
        except ValueError:
            log_type = AuditType.PRODUCT
        return cls(
            type=log_type,
            user=data.get('user', ''),
            message=data.get('message', ''),
            timestamp=data.get('timestamp', ''),
            related_id=str(data.get('related_id', '')),
            details=data.get('details') or {},
        )
