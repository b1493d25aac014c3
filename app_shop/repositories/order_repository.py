# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================
# Encapsula todo el acceso a orders.json
# Los pedidos se almacenan como diccionario: {order_id: {datos_pedido}}
# ==============================================================================

import os
from typing import Any, Dict, List, Optional, Tuple

from app_shop.repositories.base import RecordRepository


class OrderRepository(RecordRepository):
    """
    Repositorio para gestión de pedidos.

    Formato de datos en orders.json:
    {
        "1": {
            "user": 3,
            "orderItems": [{"product": 1, "quantity": 2, "price": 9.99}],
            "totalPrice": 19.98,
            "status": "Pending",
            "createdAt": "...",
            "updatedAt": "..."
        }
    }
    """

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de pedidos.

        Args:
            base_path: Directorio de datos
        """
        file_path = os.path.join(base_path, 'orders.json')
        super().__init__(file_path)

    def get_order(self, order_id: int) -> Optional[Dict[str, Any]]:
        return self.get(order_id)

    def create_order(self, order_data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """
        Crea un nuevo pedido.

        Args:
            order_data: Datos del pedido (sin ID)

        Returns:
            Par (order_id, datos guardados)
        """
        return self.create(order_data)

    def update_status(self, order_id: int, status: str) -> Optional[Dict[str, Any]]:
        """
        Sobrescribe el estado de un pedido.

        Returns:
            Pedido actualizado o None si no existe
        """
        return self.update_record(order_id, {'status': status})

    def get_all_orders(self) -> List[Tuple[int, Dict[str, Any]]]:
        return self.get_all_records()

    def get_orders_by_user(self, user_id: int) -> List[Tuple[int, Dict[str, Any]]]:
        """
        Obtiene los pedidos de un usuario.

        Args:
            user_id: ID del usuario dueño

        Returns:
            Lista de pares (order_id, datos)
        """
        return self.find_all_by('user', user_id)
