# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import os
from typing import Any, Callable, Dict, List, Optional, Tuple
from abc import ABC, abstractmethod
import threading

from app_shop.models import utc_now


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona funcionalidad común para lectura/escritura de archivos JSON
    con manejo de concurrencia básico mediante locks.

    El lock es de proceso: serializa escrituras entre hilos de un mismo
    worker, no entre procesos distintos.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su directorio) con datos vacíos si no existe."""
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.file_path):
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura de datos vacía para este repositorio.

        Returns:
            Estructura vacía (dict, list, etc.) según el repositorio
        """
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados del JSON (vacíos si el archivo está corrupto)
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (json.JSONDecodeError, FileNotFoundError):
                # Si el archivo está corrupto o no existe, retornar datos vacíos
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Args:
            data: Datos a serializar y escribir

        Raises:
            OSError: Si hay error de escritura
        """
        with self._file_lock:
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise


class DictRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como diccionario.
    El ID es la clave del diccionario.
    """

    def _empty_data(self) -> Dict:
        return {}

    def get_all(self) -> Dict[str, Any]:
        data = self._read_raw()
        return data if isinstance(data, dict) else {}

    def save_all(self, data: Dict[str, Any]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self._write_raw(data)


class ListRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como lista.

    Ejemplo: audit.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros.

        Returns:
            Lista con todos los datos
        """
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        self._write_raw(data)

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """
        Busca todos los registros que coinciden con un campo.

        Args:
            field: Nombre del campo
            value: Valor a buscar

        Returns:
            Lista de registros que coinciden
        """
        return [r for r in self.get_all() if r.get(field) == value]


class RecordRepository(DictRepository):
    """
    Repositorio de registros con ID entero autoincremental y timestamps.

    Formato en disco:
    {
        "1": {"name": "...", "createdAt": "...", "updatedAt": "..."},
        "2": {...},
        "_meta": {"nextId": 3}
    }

    Nota: Las claves son strings en JSON pero se manejan como int internamente.
    El contador "_meta.nextId" solo avanza: un ID eliminado nunca se reutiliza,
    así los pedidos que apuntan a un producto borrado no se reasignan a otro.
    """

    META_KEY = '_meta'

    def _normalize(self, raw_data: Dict[str, Any]) -> Dict[int, Dict[str, Any]]:
        """
        Normaliza los registros convirtiendo claves string a int.

        Args:
            raw_data: Datos crudos del JSON (claves string)

        Returns:
            Diccionario con claves int
        """
        normalized = {}
        for key, value in raw_data.items():
            try:
                normalized[int(key)] = value
            except (ValueError, TypeError):
                # Claves no numéricas (como _meta) no son registros
                continue
        return normalized

    def _denormalize(self, data: Dict[int, Dict[str, Any]]) -> Dict[str, Any]:
        """Convierte claves int a string para guardar en JSON."""
        return {str(k): v for k, v in data.items()}

    def load(self) -> Dict[int, Dict[str, Any]]:
        """
        Carga todos los registros desde disco.

        Returns:
            Diccionario {id: datos}
        """
        return self._normalize(self.get_all())

    def save(self, records: Dict[int, Dict[str, Any]], next_id: int = None) -> None:
        """
        Guarda los registros conservando el contador de IDs.

        Args:
            records: Diccionario {id: datos}
            next_id: Nuevo valor del contador (None = conservar el actual)
        """
        with self._file_lock:
            data = self._denormalize(records)
            if next_id is None:
                meta = self.get_all().get(self.META_KEY)
            else:
                meta = {'nextId': next_id}
            if meta is not None:
                data[self.META_KEY] = meta
            self.save_all(data)

    def get(self, record_id: int) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Args:
            record_id: ID del registro

        Returns:
            Datos del registro o None si no existe
        """
        return self.load().get(record_id)

    def exists(self, record_id: int) -> bool:
        return record_id in self.load()

    def get_next_id(self, raw_data: Dict[str, Any] = None) -> int:
        """
        Genera el siguiente ID sin reutilizar IDs eliminados.

        Args:
            raw_data: Contenido crudo del archivo (None = leer de disco)

        Returns:
            El mayor entre el contador guardado y max(ID) + 1
        """
        raw_data = self.get_all() if raw_data is None else raw_data
        records = self._normalize(raw_data)
        next_id = max(records.keys()) + 1 if records else 1

        meta = raw_data.get(self.META_KEY)
        stored = meta.get('nextId') if isinstance(meta, dict) else None
        if isinstance(stored, int) and not isinstance(stored, bool) and stored > next_id:
            next_id = stored
        return next_id

    def create(self, data: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """
        Crea un registro nuevo asignando ID y timestamps.

        Args:
            data: Datos del registro (sin ID)

        Returns:
            Tupla (id, datos guardados)
        """
        with self._file_lock:
            raw_data = self.get_all()
            records = self._normalize(raw_data)
            record_id = self.get_next_id(raw_data)
            now = utc_now()
            record = dict(data)
            record['createdAt'] = now
            record['updatedAt'] = now
            records[record_id] = record
            self.save(records, next_id=record_id + 1)
            return record_id, record

    def update_record(self, record_id: int, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Mezcla campos en un registro existente y actualiza updatedAt.

        Args:
            record_id: ID del registro
            updates: Campos a actualizar

        Returns:
            Registro actualizado o None si no existía
        """
        return self.update_where(record_id, lambda record: True, updates)

    def update_where(
        self,
        record_id: int,
        condition: Callable[[Dict[str, Any]], bool],
        updates: Any
    ) -> Optional[Dict[str, Any]]:
        """
        Actualización condicional: lee, evalúa y escribe dentro del lock.

        Args:
            record_id: ID del registro
            condition: Predicado sobre el registro actual
            updates: Dict de campos, o función registro -> dict de campos

        Returns:
            Registro actualizado, o None si no existe o la condición falla
        """
        with self._file_lock:
            records = self.load()
            record = records.get(record_id)
            if record is None or not condition(record):
                return None
            changes = updates(record) if callable(updates) else updates
            record.update(changes)
            record['updatedAt'] = utc_now()
            self.save(records)
            return record

    def delete_record(self, record_id: int) -> Optional[Dict[str, Any]]:
        """
        Elimina un registro.

        Returns:
            Datos del registro eliminado o None si no existía
        """
        with self._file_lock:
            records = self.load()
            removed = records.pop(record_id, None)
            if removed is not None:
                self.save(records)
            return removed

    def get_all_records(self) -> List[Tuple[int, Dict[str, Any]]]:
        """Todos los registros como pares (id, datos) ordenados por ID."""
        return sorted(self.load().items())

    def find_by(self, field: str, value: Any) -> Optional[Tuple[int, Dict[str, Any]]]:
        """
        Busca el primer registro cuyo campo coincide.

        Returns:
            Par (id, datos) o None
        """
        for record_id, record in self.get_all_records():
            if record.get(field) == value:
                return record_id, record
        return None

    def find_all_by(self, field: str, value: Any) -> List[Tuple[int, Dict[str, Any]]]:
        return [
            (record_id, record) for record_id, record in self.get_all_records()
            if record.get(field) == value
        ]
