# ==============================================================================
# SERVICIO DE PRODUCTOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con el catálogo y el stock.
# Toda operación que deja stock <= umbral emite una alerta de stock bajo.
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_shop.models import Product
from app_shop.performance_logger import profile_function
from app_shop.repositories.interfaces import IProductRepository
from app_shop.services.audit_service import AuditService
from app_shop.services.errors import ConflictError, NotFoundError
from app_shop.services.validators import (
    validate_new_product,
    validate_product_updates,
    validate_stock,
)


class ProductService:
    """
    Servicio para gestión del catálogo.

    Responsabilidades:
    - CRUD de productos con validación previa a cualquier escritura
    - Unicidad del nombre
    - Ajuste manual de stock y descuento condicional por pedidos
    - Alertas de stock bajo (informativas, nunca bloquean)
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        audit_service: AuditService = None
    ):
        """
        Inicializa el servicio de productos.

        Args:
            product_repo: Repositorio de productos
            audit_service: Servicio de auditoría (opcional)
        """
        self.product_repo = product_repo
        self.audit_service = audit_service

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    @profile_function(name="Listar productos")
    def list_products(self) -> List[Product]:
        """
        Obtiene todos los productos del catálogo.

        Returns:
            Lista de productos ordenada por ID
        """
        return [
            Product.from_dict(pid, data)
            for pid, data in self.product_repo.get_all_products()
        ]

    def find_product(self, pid: int) -> Optional[Product]:
        """Igual que get_product() pero retorna None si no existe."""
        data = self.product_repo.get_product(pid)
        return Product.from_dict(pid, data) if data is not None else None

    def get_product(self, pid: int) -> Product:
        """
        Obtiene un producto por su ID.

        Raises:
            NotFoundError: Si no existe
        """
        product = self.find_product(pid)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    # =========================================================================
    # OPERACIONES DE PRODUCTOS
    # =========================================================================

    def create_product(self, data: Dict[str, Any], user: str = None) -> Product:
        """
        Crea un nuevo producto.

        Args:
            data: name, description, price, stock, lowStockThreshold (opcional)
            user: Usuario que crea (para auditoría)

        Returns:
            Producto creado

        Raises:
            InvalidInputError: Datos inválidos
            ConflictError: Ya existe un producto con ese nombre
        """
        fields = validate_new_product(data)

        if self.product_repo.find_by_name(fields['name']) is not None:
            raise ConflictError("Product already exists")

        pid, record = self.product_repo.create_product(fields)
        product = Product.from_dict(pid, record)

        if self.audit_service and user:
            self.audit_service.log_product_created(user, pid, product.name, product.stock)

        self.check_low_stock(product)
        return product

    def update_product(self, pid: int, data: Dict[str, Any], user: str = None) -> Product:
        """
        Actualización parcial: solo los campos presentes en data.

        Args:
            pid: ID del producto
            data: Campos a actualizar
            user: Usuario que actualiza (para auditoría)

        Returns:
            Producto actualizado

        Raises:
            NotFoundError: Si no existe
            InvalidInputError: Algún campo presente es inválido
            ConflictError: El nuevo nombre pertenece a otro producto
        """
        self.get_product(pid)
        updates = validate_product_updates(data)

        if 'name' in updates:
            existing = self.product_repo.find_by_name(updates['name'])
            if existing is not None and existing[0] != pid:
                raise ConflictError("Product already exists")

        record = self.product_repo.update_product(pid, updates)
        if record is None:
            # Eliminado entre la lectura y la escritura
            raise NotFoundError("Product not found")
        product = Product.from_dict(pid, record)

        if self.audit_service and user:
            self.audit_service.log_product_updated(user, pid, product.name, updates)

        self.check_low_stock(product)
        return product

    def delete_product(self, pid: int, user: str = None) -> Product:
        """
        Elimina un producto. Los pedidos existentes no se modifican.

        Raises:
            NotFoundError: Si no existe
        """
        removed = self.product_repo.delete_product(pid)
        if removed is None:
            raise NotFoundError("Product not found")
        product = Product.from_dict(pid, removed)

        if self.audit_service and user:
            self.audit_service.log_product_deleted(user, pid, product.name)

        return product

    # =========================================================================
    # OPERACIONES DE STOCK
    # =========================================================================

    def update_stock(self, pid: int, data: Dict[str, Any], user: str = None) -> Product:
        """
        Sobrescribe el stock de un producto (solo ese campo).

        Args:
            pid: ID del producto
            data: Body con 'stock'
            user: Usuario que ajusta (para auditoría)

        Raises:
            NotFoundError: Si no existe
            InvalidInputError: stock ausente o inválido
        """
        before = self.get_product(pid)
        stock = validate_stock(data)

        record = self.product_repo.set_stock(pid, stock)
        if record is None:
            raise NotFoundError("Product not found")
        product = Product.from_dict(pid, record)

        if self.audit_service and user:
            self.audit_service.log_stock_set(user, pid, product.name, before.stock, product.stock)

        self.check_low_stock(product)
        return product

    def decrement_stock(self, pid: int, quantity: int) -> Optional[Product]:
        """
        Descuenta stock si alcanza (operación atómica del repositorio).

        Args:
            pid: ID del producto
            quantity: Unidades a descontar

        Returns:
            Producto actualizado, o None si no existe o no alcanzó
        """
        record = self.product_repo.decrement_stock(pid, quantity)
        if record is None:
            return None
        product = Product.from_dict(pid, record)
        self.check_low_stock(product)
        return product

    # =========================================================================
    # ALERTAS
    # =========================================================================

    def check_low_stock(self, product: Product) -> bool:
        """
        Emite una alerta si el stock quedó en o bajo el umbral.
        La alerta es informativa: un fallo al registrarla no interrumpe
        la operación que la originó.

        Returns:
            True si se emitió la alerta
        """
        if not product.is_low_stock:
            return False

        print(
            f"[ALERTA STOCK] Low stock alert for product: {product.name}. "
            f"Current stock: {product.stock}"
        )
        if self.audit_service:
            self.audit_service.log_low_stock(
                product.id, product.name, product.stock, product.low_stock_threshold
            )
        return True

    def get_low_stock_products(self) -> List[Product]:
        """Productos actualmente en o bajo su umbral."""
        return [
            Product.from_dict(pid, data)
            for pid, data in self.product_repo.get_low_stock_products()
        ]
