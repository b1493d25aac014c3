# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula todo el acceso a users.json
# Los usuarios se almacenan como diccionario: {user_id: {name, email, password, role}}
# ==============================================================================

import os
from typing import Any, Dict, Optional, Tuple

from app_shop.repositories.base import RecordRepository


class UserRepository(RecordRepository):
    """
    Repositorio para gestión de usuarios.

    Formato de datos en users.json:
    {
        "1": {"name": "Ana", "email": "ana@mail.com", "password": "scrypt:...", "role": "admin"},
        "2": {"name": "Luis", "email": "luis@mail.com", "password": "scrypt:...", "role": "customer"}
    }
    """

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de usuarios.

        Args:
            base_path: Directorio de datos
        """
        file_path = os.path.join(base_path, 'users.json')
        super().__init__(file_path)

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        return self.get(user_id)

    def get_by_email(self, email: str) -> Optional[Tuple[int, Dict[str, Any]]]:
        """
        Busca un usuario por email (se comparan en minúsculas).

        Args:
            email: Email a buscar

        Returns:
            Par (user_id, datos) o None
        """
        return self.find_by('email', (email or '').strip().lower())

    def user_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str = 'customer'
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Crea un nuevo usuario.

        Args:
            name: Nombre visible
            email: Email (se guarda en minúsculas)
            password_hash: Hash de la contraseña
            role: Rol del usuario

        Returns:
            Par (user_id, datos guardados)
        """
        return self.create({
            'name': name,
            'email': email.strip().lower(),
            'password': password_hash,
            'role': role,
        })

    # NOTA: La validación de credenciales se hace SOLO en UserService
    # usando check_password_hash.
