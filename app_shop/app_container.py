# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo arma repositorios y servicios para un directorio de datos.
# Facilita:
#   - Inyección de dependencias
#   - Testing (cada test arma su propio contenedor sobre un directorio temporal)
#   - Cambiar repos sin tocar servicios
#
# No hay instancia global: create_app() crea un contenedor y lo guarda en
# app.extensions['container'].
#
# Para migrar de JSON a otra base de datos basta con nuevas clases que
# implementen las interfaces de repositories/interfaces.py y cambiar los
# imports de este archivo. Los servicios NO requieren cambios.
# ==============================================================================

from typing import Optional

from app_shop.config import AppConfig
from app_shop.repositories import (
    AuditRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
)
from app_shop.services import (
    AuditService,
    OrderService,
    ProductService,
    UserService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Crea cada repositorio y servicio la primera vez que se pide
    y devuelve siempre la misma instancia después.

    Uso:
        container = AppContainer(config)
        order_service = container.order_service
    """

    def __init__(self, config: AppConfig):
        """
        Inicializa el contenedor.

        Args:
            config: Configuración (data_dir, secret_key, vigencia de tokens)
        """
        self.config = config
        self.reset()

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.config.data_dir)
        return self._product_repo

    @property
    def order_repo(self) -> OrderRepository:
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.config.data_dir)
        return self._order_repo

    @property
    def user_repo(self) -> UserRepository:
        if self._user_repo is None:
            self._user_repo = UserRepository(self.config.data_dir)
        return self._user_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self.config.data_dir)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        """Servicio de auditoría."""
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def product_service(self) -> ProductService:
        """Servicio de catálogo y stock."""
        if self._product_service is None:
            self._product_service = ProductService(
                self.product_repo,
                self.audit_service
            )
        return self._product_service

    @property
    def order_service(self) -> OrderService:
        """Servicio de pedidos."""
        if self._order_service is None:
            self._order_service = OrderService(
                self.order_repo,
                self.product_service,
                self.user_repo,
                self.audit_service
            )
        return self._order_service

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios y tokens."""
        if self._user_service is None:
            self._user_service = UserService(
                self.user_repo,
                self.config.secret_key,
                self.config.token_expire_minutes,
                self.audit_service
            )
        return self._user_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        Útil para testing o para recargar datos.
        """
        self._product_repo: Optional[ProductRepository] = None
        self._order_repo: Optional[OrderRepository] = None
        self._user_repo: Optional[UserRepository] = None
        self._audit_repo: Optional[AuditRepository] = None

        self._audit_service: Optional[AuditService] = None
        self._product_service: Optional[ProductService] = None
        self._order_service: Optional[OrderService] = None
        self._user_service: Optional[UserService] = None
