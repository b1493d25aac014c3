# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con usuarios:
# registro, inicio de sesión y tokens de acceso.
#
# - Las contraseñas se guardan SOLO como hash (werkzeug.security)
# - Los tokens son JWT firmados (HS256) con la SECRET_KEY de la app
# - El rol que vale es el guardado en users.json, no el del token
# ==============================================================================

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from app_shop.models import User, UserRole
from app_shop.repositories.interfaces import IUserRepository
from app_shop.services.access import Caller
from app_shop.services.audit_service import AuditService
from app_shop.services.errors import (
    ConflictError,
    InvalidInputError,
    UnauthenticatedError,
)
from app_shop.services.validators import validate_registration


ALGORITHM = "HS256"


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Registro (clientes por la API, admins solo por bootstrap)
    - Autenticación con email y contraseña
    - Emisión y verificación de tokens
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        secret_key: str,
        token_expire_minutes: int = 720,
        audit_service: AuditService = None
    ):
        """
        Inicializa el servicio de usuarios.

        Args:
            user_repo: Repositorio de usuarios
            secret_key: Clave para firmar tokens
            token_expire_minutes: Vigencia de cada token
            audit_service: Servicio de auditoría (opcional)
        """
        self.user_repo = user_repo
        self.secret_key = secret_key
        self.token_expire_minutes = token_expire_minutes
        self.audit_service = audit_service

    # =========================================================================
    # REGISTRO Y LOGIN
    # =========================================================================

    def register(self, data: Dict[str, Any], role: UserRole = UserRole.CUSTOMER) -> User:
        """
        Registra un nuevo usuario.

        Args:
            data: name, email, password
            role: Rol a asignar

        Returns:
            Usuario creado

        Raises:
            InvalidInputError: Datos incompletos o inválidos
            ConflictError: El email ya está registrado
        """
        fields = validate_registration(data)

        if self.user_repo.user_exists(fields['email']):
            raise ConflictError("User already exists")

        user_id, record = self.user_repo.create_user(
            fields['name'],
            fields['email'],
            generate_password_hash(fields['password']),
            role.value
        )
        user = User.from_dict(user_id, record)

        if self.audit_service:
            self.audit_service.log_user_registered(user.email, user.id, user.role.value)

        return user

    def login(self, data: Dict[str, Any]) -> User:
        """
        Autentica con email y contraseña.

        Raises:
            InvalidInputError: Falta email o contraseña
            UnauthenticatedError: Credenciales incorrectas
        """
        email = data.get('email')
        password = data.get('password')
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise InvalidInputError("Please add email and password")

        found = self.user_repo.get_by_email(email)
        if found is None:
            raise UnauthenticatedError("Invalid email or password")

        user = User.from_dict(*found)
        # Verificación EXCLUSIVA con check_password_hash
        if not check_password_hash(user.password_hash, password):
            raise UnauthenticatedError("Invalid email or password")

        if self.audit_service:
            self.audit_service.log_user_login(user.email, user.id)

        return user

    def get_user(self, user_id: int) -> Optional[User]:
        data = self.user_repo.get_user(user_id)
        return User.from_dict(user_id, data) if data is not None else None

    def ensure_admin(self, email: str, password: str, name: str = 'Admin') -> User:
        """
        Crea la cuenta de administrador si todavía no existe.
        Se llama al iniciar la app cuando la configuración define una.

        Returns:
            El usuario (existente o recién creado)
        """
        found = self.user_repo.get_by_email(email)
        if found is not None:
            return User.from_dict(*found)

        user = self.register(
            {'name': name, 'email': email, 'password': password},
            role=UserRole.ADMIN
        )
        print(f"[INICIO] Creada cuenta de administrador {user.email}")
        return user

    # =========================================================================
    # TOKENS
    # =========================================================================

    def issue_token(self, user: User) -> str:
        """
        Genera un token de acceso para el usuario.

        Returns:
            JWT firmado con sub=ID, role y exp
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.token_expire_minutes)
        claims = {'sub': str(user.id), 'role': user.role.value, 'exp': expire}
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def authenticate_token(self, token: Optional[str]) -> Caller:
        """
        Resuelve el usuario de un token.

        Args:
            token: Token Bearer (sin el prefijo)

        Returns:
            Caller con ID y rol actuales del usuario

        Raises:
            UnauthenticatedError: Sin token, token inválido/vencido o usuario inexistente
        """
        if not token:
            raise UnauthenticatedError("Not authorized, no token")

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
            user_id = int(payload.get('sub'))
        except (JWTError, TypeError, ValueError):
            raise UnauthenticatedError("Not authorized, token failed")

        user = self.get_user(user_id)
        if user is None:
            raise UnauthenticatedError("Not authorized, user not found")

        return Caller(id=user.id, role=user.role, name=user.name, email=user.email)

    def auth_response(self, user: User) -> Dict[str, Any]:
        """Body de respuesta de registro/login."""
        return {
            '_id': user.id,
            'name': user.name,
            'email': user.email,
            'role': user.role.value,
            'token': self.issue_token(user),
        }
