# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Encapsula todo el acceso a audit.json
# La auditoría se almacena como lista: [{log1}, {log2}, ...]
# ==============================================================================

import os
from typing import Any, Dict, List
from datetime import datetime
from .base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio para gestión del log de auditoría.

    Formato de datos en audit.json:
    [
        {
            "type": "ORDER",
            "user": "ana@mail.com",
            "message": "Pedido 1 creado por ana@mail.com - Total: 19.98 - 2 items",
            "timestamp": "2024-01-01 10:00:00",
            "related_id": "1",
            "details": {...}
        }
    ]
    """

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de auditoría.

        Args:
            base_path: Directorio de datos
        """
        file_path = os.path.join(base_path, 'audit.json')
        super().__init__(file_path)

    def load(self) -> List[Dict[str, Any]]:
        """
        Carga todos los logs de auditoría.

        Returns:
            Lista de logs (más recientes primero)
        """
        return self.get_all()

    def save(self, logs: List[Dict[str, Any]]) -> None:
        """
        Guarda todos los logs.
        Aplica límite de registros para evitar archivos muy grandes.
        """
        if len(logs) > self.MAX_LOGS:
            logs = logs[:self.MAX_LOGS]
        self.save_all(logs)

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (PRODUCT, STOCK, ORDER, USER)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (producto, pedido, usuario)
            details: Detalles adicionales
        """
        log_entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': str(related_id),
            'details': details or {}
        }

        with self._file_lock:
            logs = self.get_all()
            logs.insert(0, log_entry)  # Insertar al inicio (más reciente primero)
            self.save(logs)

    def get_logs_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        """
        Filtra logs por tipo.

        Args:
            log_type: Tipo a filtrar (STOCK, ORDER, etc.)

        Returns:
            Lista de logs del tipo especificado
        """
        return self.find_all_by('type', log_type)

    def get_logs_by_related_id(self, related_id: Any) -> List[Dict[str, Any]]:
        return self.find_all_by('related_id', str(related_id))

    def get_recent_logs(self, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Obtiene los logs más recientes.

        Args:
            limit: Número máximo de logs
        """
        return self.load()[:limit]
