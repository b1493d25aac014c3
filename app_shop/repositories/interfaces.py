# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Este archivo define las interfaces (protocolos) que todos los repositorios
# deben implementar. Esto permite:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Los servicios dependen de interfaces, NO de implementaciones concretas
#    - Cambiar JSON → base de datos solo requiere nueva implementación
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# 3. DOCUMENTACIÓN
#    - Contratos claros de qué hace cada repositorio
#
# Un repositorio alternativo debe respetar la semántica de decrement_stock:
# comparar y descontar en una sola operación atómica.
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class IProductRepository(Protocol):
    """
    Interfaz para el repositorio de productos.
    """

    def get_product(self, pid: int) -> Optional[Dict[str, Any]]:
        """Obtiene un producto por ID."""
        ...

    def find_by_name(self, name: str) -> Optional[Tuple[int, Dict[str, Any]]]:
        """Busca un producto por nombre exacto."""
        ...

    def create_product(self, data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """Crea un producto, retorna (pid, datos)."""
        ...

    def update_product(self, pid: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Mezcla campos en un producto."""
        ...

    def set_stock(self, pid: int, stock: int) -> Optional[Dict[str, Any]]:
        """Sobrescribe el stock."""
        ...

    def decrement_stock(self, pid: int, quantity: int) -> Optional[Dict[str, Any]]:
        """Descuenta stock solo si alcanza."""
        ...

    def delete_product(self, pid: int) -> Optional[Dict[str, Any]]:
        """Elimina un producto."""
        ...

    def get_all_products(self) -> List[Tuple[int, Dict[str, Any]]]:
        """Lista todos los productos."""
        ...

    def get_low_stock_products(self) -> List[Tuple[int, Dict[str, Any]]]:
        """Lista los productos con stock en o bajo su umbral."""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """
    Interfaz para el repositorio de pedidos.
    """

    def get_order(self, order_id: int) -> Optional[Dict[str, Any]]:
        """Obtiene un pedido por ID."""
        ...

    def create_order(self, order_data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """Crea un pedido, retorna (order_id, datos)."""
        ...

    def update_status(self, order_id: int, status: str) -> Optional[Dict[str, Any]]:
        """Sobrescribe el estado."""
        ...

    def get_all_orders(self) -> List[Tuple[int, Dict[str, Any]]]:
        """Lista todos los pedidos."""
        ...

    def get_orders_by_user(self, user_id: int) -> List[Tuple[int, Dict[str, Any]]]:
        """Lista los pedidos de un usuario."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """
    Interfaz para el repositorio de usuarios.
    """

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Obtiene un usuario por ID."""
        ...

    def get_by_email(self, email: str) -> Optional[Tuple[int, Dict[str, Any]]]:
        """Busca un usuario por email."""
        ...

    def user_exists(self, email: str) -> bool:
        """Indica si el email ya está registrado."""
        ...

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str
    ) -> Tuple[int, Dict[str, Any]]:
        """Crea un nuevo usuario."""
        ...


@runtime_checkable
class IAuditRepository(Protocol):
    """
    Interfaz para el repositorio de auditoría.
    """

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str,
        details: Dict[str, Any]
    ) -> None:
        """Registra un evento de auditoría."""
        ...

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        """Logs de un tipo, más recientes primero."""
        ...

    def get_recent_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Los últimos logs registrados."""
        ...
