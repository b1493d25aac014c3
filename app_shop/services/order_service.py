# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con pedidos.
# place_order() es la ÚNICA función que crea pedidos - centralizada.
#
# IMPORTANTE - SIN ROLLBACK:
# El stock de cada línea se descuenta y persiste ANTES de pasar a la
# siguiente. Si la línea k falla, las líneas 1..k-1 ya quedaron descontadas
# y no se compensan. El pedido solo se crea si todas las líneas pasan.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_shop.models import Order, OrderItem, OrderStatus, Product
from app_shop.performance_logger import profile_function
from app_shop.repositories.interfaces import IOrderRepository, IUserRepository
from app_shop.services.access import Caller, can_view_order
from app_shop.services.audit_service import AuditService
from app_shop.services.errors import (
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
)
from app_shop.services.product_service import ProductService
from app_shop.services.validators import validate_order_items, validate_status


class OrderService:
    """
    Servicio para gestión de pedidos.

    Responsabilidades:
    - Crear pedidos validando stock y congelando precios
    - Consultar pedidos según el rol del usuario
    - Cambiar estados (sin grafo de transiciones)
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        product_service: ProductService,
        user_repo: IUserRepository,
        audit_service: AuditService = None
    ):
        """
        Inicializa el servicio de pedidos.

        Args:
            order_repo: Repositorio de pedidos
            product_service: Servicio de productos
            user_repo: Repositorio de usuarios (para mostrar el dueño)
            audit_service: Servicio de auditoría (opcional)
        """
        self.order_repo = order_repo
        self.product_service = product_service
        self.user_repo = user_repo
        self.audit_service = audit_service

    # =========================================================================
    # CREACIÓN DE PEDIDOS
    # =========================================================================

    @profile_function(name="Crear pedido")
    def place_order(self, user_id: int, order_items: Any, user: str = None) -> Order:
        """
        Crea un pedido para el usuario.

        Args:
            user_id: ID del cliente dueño del pedido
            order_items: Lista [{product, quantity}]
            user: Email del cliente (para auditoría)

        Returns:
            Pedido creado (estado Pending)

        Raises:
            InvalidInputError: Lista vacía o items mal formados (sin tocar stock)
            NotFoundError: Un producto no existe
            InsufficientStockError: Un producto no tiene stock suficiente
        """
        items = validate_order_items(order_items)

        total_price = 0
        priced_items: List[OrderItem] = []

        for item in items:
            pid = item['product']
            quantity = item['quantity']

            product = self.product_service.find_product(pid)
            if product is None:
                raise NotFoundError(f"Product not found: {pid}")
            if product.stock < quantity:
                raise InsufficientStockError(product.name, product.stock)

            # Descuento inmediato; el repositorio vuelve a comparar bajo lock
            updated = self.product_service.decrement_stock(pid, quantity)
            if updated is None:
                self._raise_decrement_failure(pid)

            # Precio congelado al momento del descuento
            line = OrderItem(product=pid, quantity=quantity, price=updated.price)
            total_price += line.line_total
            priced_items.append(line)

        order_id, record = self.order_repo.create_order({
            'user': user_id,
            'orderItems': [i.to_dict() for i in priced_items],
            'totalPrice': total_price,
            'status': OrderStatus.PENDING.value,
        })
        order = Order.from_dict(order_id, record)

        if self.audit_service:
            self.audit_service.log_order_placed(
                user or str(user_id), order_id, total_price, len(priced_items)
            )

        return order

    def _raise_decrement_failure(self, pid: int) -> None:
        """Explica por qué falló el descuento condicional (otra petición ganó)."""
        current = self.product_service.find_product(pid)
        if current is None:
            raise NotFoundError(f"Product not found: {pid}")
        raise InsufficientStockError(current.name, current.stock)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_order(self, order_id: int) -> Order:
        """
        Obtiene un pedido sin resolver referencias.

        Raises:
            NotFoundError: Si no existe
        """
        data = self.order_repo.get_order(order_id)
        if data is None:
            raise NotFoundError("Order not found")
        return Order.from_dict(order_id, data)

    def get_orders(self, caller: Caller) -> List[Dict[str, Any]]:
        """
        Lista pedidos según el rol.
        - Admin: todos, con usuario y productos resueltos
        - Cliente: solo los suyos, con productos resueltos

        Returns:
            Lista de pedidos en formato de respuesta
        """
        if caller.is_admin:
            records = self.order_repo.get_all_orders()
        else:
            records = self.order_repo.get_orders_by_user(caller.id)

        orders = [Order.from_dict(oid, data) for oid, data in records]
        products = {p.id: p for p in self.product_service.list_products()}
        return [
            self._populate(order, products, with_user=caller.is_admin)
            for order in orders
        ]

    def get_order_by_id(self, caller: Caller, order_id: int) -> Dict[str, Any]:
        """
        Obtiene un pedido si el usuario puede verlo.

        Raises:
            NotFoundError: Si no existe
            ForbiddenError: Cliente que no es dueño del pedido
        """
        order = self.get_order(order_id)
        if not can_view_order(caller, order.user):
            raise ForbiddenError("Not authorized to view this order")

        products = {}
        for item in order.order_items:
            product = self.product_service.find_product(item.product)
            if product is not None:
                products[product.id] = product
        return self._populate(order, products, with_user=True)

    def _populate(
        self,
        order: Order,
        products: Dict[int, Product],
        with_user: bool
    ) -> Dict[str, Any]:
        """
        Reemplaza IDs por datos visibles.
        Un producto eliminado se muestra como None; la línea conserva su precio.
        """
        data = order.to_public_dict()
        for item in data['orderItems']:
            product = products.get(item['product'])
            item['product'] = (
                {'_id': product.id, 'name': product.name, 'price': product.price}
                if product is not None else None
            )
        if with_user:
            data['user'] = self._user_summary(order.user)
        return data

    def _user_summary(self, user_id: int) -> Optional[Dict[str, Any]]:
        user = self.user_repo.get_user(user_id)
        if user is None:
            return None
        return {'_id': user_id, 'name': user.get('name', ''), 'email': user.get('email', '')}

    # =========================================================================
    # ESTADOS
    # =========================================================================

    def update_status(self, order_id: int, status: Any, user: str = None) -> Order:
        """
        Sobrescribe el estado de un pedido (cualquier estado desde cualquiera).

        Args:
            order_id: ID del pedido
            status: Pending, Shipped o Delivered
            user: Usuario que cambia el estado (para auditoría)

        Raises:
            InvalidInputError: Estado inválido (no se modifica nada)
            NotFoundError: Si no existe
        """
        new_status = validate_status(status)
        old = self.get_order(order_id)

        record = self.order_repo.update_status(order_id, new_status.value)
        if record is None:
            raise NotFoundError("Order not found")
        order = Order.from_dict(order_id, record)

        if self.audit_service and user:
            self.audit_service.log_order_status_change(
                user, order_id, old.status.value, order.status.value
            )

        return order
