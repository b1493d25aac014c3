# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a products.json
# Los productos se almacenan como diccionario: {product_id: {datos_producto}}
# ==============================================================================

import os
from typing import Any, Dict, List, Optional, Tuple

from app_shop.repositories.base import RecordRepository


class ProductRepository(RecordRepository):
    """
    Repositorio para gestión del catálogo de productos.

    Formato de datos en products.json:
    {
        "1": {
            "name": "Widget",
            "description": "...",
            "price": 9.99,
            "stock": 10,
            "lowStockThreshold": 5,
            "createdAt": "...",
            "updatedAt": "..."
        }
    }
    """

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de productos.

        Args:
            base_path: Directorio de datos
        """
        file_path = os.path.join(base_path, 'products.json')
        super().__init__(file_path)

    def get_product(self, pid: int) -> Optional[Dict[str, Any]]:
        return self.get(pid)

    def product_exists(self, pid: int) -> bool:
        return self.exists(pid)

    def find_by_name(self, name: str) -> Optional[Tuple[int, Dict[str, Any]]]:
        """
        Busca un producto por nombre exacto.

        Args:
            name: Nombre a buscar

        Returns:
            Par (pid, datos) o None
        """
        return self.find_by('name', name)

    def create_product(self, data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        return self.create(data)

    def update_product(self, pid: int, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Actualiza un producto existente.

        Args:
            pid: ID del producto
            data: Nuevos datos (se mezclan con existentes)

        Returns:
            Producto actualizado o None si no existía
        """
        return self.update_record(pid, data)

    def set_stock(self, pid: int, stock: int) -> Optional[Dict[str, Any]]:
        """Sobrescribe solo el campo stock."""
        return self.update_record(pid, {'stock': stock})

    def decrement_stock(self, pid: int, quantity: int) -> Optional[Dict[str, Any]]:
        """
        Descuenta stock solo si alcanza (compare-and-decrement).
        La lectura, la comparación y la escritura ocurren bajo el mismo lock.

        Args:
            pid: ID del producto
            quantity: Unidades a descontar

        Returns:
            Producto actualizado, o None si no existe o no hay stock suficiente
        """
        return self.update_where(
            pid,
            lambda product: product.get('stock', 0) >= quantity,
            lambda product: {'stock': product.get('stock', 0) - quantity}
        )

    def delete_product(self, pid: int) -> Optional[Dict[str, Any]]:
        return self.delete_record(pid)

    def get_all_products(self) -> List[Tuple[int, Dict[str, Any]]]:
        """
        Obtiene todos los productos.

        Returns:
            Lista de pares (pid, datos) ordenada por ID
        """
        return self.get_all_records()

    def get_low_stock_products(self) -> List[Tuple[int, Dict[str, Any]]]:
        """
        Obtiene productos con stock en o bajo su umbral.

        Returns:
            Lista de pares (pid, datos)
        """
        return [
            (pid, data) for pid, data in self.get_all_records()
            if data.get('stock', 0) <= data.get('lowStockThreshold', 0)
        ]
