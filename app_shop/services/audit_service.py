# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza toda la lógica de registro de auditoría.
# Formatea mensajes humanizados y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List

from app_shop.models import AuditLog, AuditType
from app_shop.repositories.interfaces import IAuditRepository


class AuditService:
    """
    Servicio para registro y consulta de auditoría.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización de eventos (PRODUCT, STOCK, ORDER, USER)
    - Consulta de logs recientes y por tipo

    Las alertas de stock bajo también quedan registradas aquí (tipo STOCK).
    """

    def __init__(self, audit_repo: IAuditRepository):
        """
        Inicializa el servicio de auditoría.

        Args:
            audit_repo: Repositorio de auditoría
        """
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: AuditType,
        user: str,
        message: str,
        related_id: Any = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento de auditoría genérico.
        Si el archivo no se puede escribir se avisa por consola y la
        operación que originó el evento se mantiene.

        Args:
            log_type: Tipo de evento
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (producto, pedido, usuario)
            details: Detalles adicionales
        """
        try:
            self.audit_repo.log(log_type.value, user, message, str(related_id), details)
        except OSError as e:
            print(f"[ADVERTENCIA] No se pudo registrar la auditoría ({log_type.value}): {e}")

    # --- Productos ---

    def log_product_created(self, user: str, pid: int, name: str, stock: int) -> None:
        message = f"Producto '{name}' (ID {pid}) creado por {user} con stock {stock}"
        self.log(AuditType.PRODUCT, user, message, pid, {'name': name, 'stock': stock})

    def log_product_updated(self, user: str, pid: int, name: str, changes: Dict[str, Any]) -> None:
        """
        Registra la edición de un producto.

        Args:
            user: Usuario que editó
            pid: ID del producto
            name: Nombre (ya actualizado)
            changes: Campos aplicados
        """
        fields = ', '.join(sorted(changes)) or 'ninguno'
        message = f"Producto '{name}' (ID {pid}) editado por {user} - Campos: {fields}"
        self.log(AuditType.PRODUCT, user, message, pid, {'changes': changes})

    def log_product_deleted(self, user: str, pid: int, name: str) -> None:
        message = f"Producto '{name}' (ID {pid}) eliminado por {user}"
        self.log(AuditType.PRODUCT, user, message, pid)

    # --- Stock ---

    def log_stock_set(self, user: str, pid: int, name: str, before: int, after: int) -> None:
        """
        Registra un ajuste manual de stock.

        Args:
            user: Usuario que ajustó
            pid: ID del producto
            name: Nombre del producto
            before: Stock anterior
            after: Stock nuevo
        """
        message = f"Stock de '{name}' ajustado por {user}: {before} → {after}"
        self.log(AuditType.STOCK, user, message, pid, {'before': before, 'after': after})

    def log_low_stock(self, pid: int, name: str, stock: int, threshold: int) -> None:
        """
        Registra una alerta de stock bajo (solo informativa).

        Args:
            pid: ID del producto
            name: Nombre del producto
            stock: Stock actual
            threshold: Umbral configurado
        """
        message = f"Low stock alert for product: {name}. Current stock: {stock}"
        self.log(
            AuditType.STOCK,
            'sistema',
            message,
            pid,
            {'alert': 'low_stock', 'stock': stock, 'lowStockThreshold': threshold}
        )

    # --- Pedidos ---

    def log_order_placed(self, user: str, order_id: int, total: float, items_count: int) -> None:
        message = f"Pedido {order_id} creado por {user} - Total: {total:.2f} - {items_count} items"
        self.log(
            AuditType.ORDER, user, message, order_id,
            {'total': total, 'items_count': items_count}
        )

    def log_order_status_change(
        self,
        user: str,
        order_id: int,
        old_status: str,
        new_status: str
    ) -> None:
        """
        Registra un cambio de estado de pedido.

        Args:
            user: Usuario que cambió el estado
            order_id: ID del pedido
            old_status: Estado anterior
            new_status: Nuevo estado
        """
        message = f"Pedido {order_id}: {old_status} → {new_status} por {user}"
        self.log(
            AuditType.ORDER, user, message, order_id,
            {'from': old_status, 'to': new_status}
        )

    # --- Usuarios ---

    def log_user_registered(self, email: str, user_id: int, role: str) -> None:
        message = f"Usuario {email} registrado con rol {role}"
        self.log(AuditType.USER, email, message, user_id, {'role': role})

    def log_user_login(self, email: str, user_id: int) -> None:
        self.log(AuditType.USER, email, f"Inicio de sesión de {email}", user_id)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_recent(self, limit: int = 100) -> List[AuditLog]:
        """
        Obtiene los eventos más recientes.

        Args:
            limit: Número máximo de eventos

        Returns:
            Lista de AuditLog (más recientes primero)
        """
        return [AuditLog.from_dict(d) for d in self.audit_repo.get_recent_logs(limit)]

    def get_by_type(self, log_type: AuditType) -> List[AuditLog]:
        return [AuditLog.from_dict(d) for d in self.audit_repo.get_logs_by_type(log_type.value)]

    def get_low_stock_alerts(self) -> List[AuditLog]:
        """Solo las alertas de stock bajo."""
        return [
            entry for entry in self.get_by_type(AuditType.STOCK)
            if entry.details.get('alert') == 'low_stock'
        ]
