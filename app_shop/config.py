# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Todos los valores salen de variables de entorno. load_config() se llama UNA
# vez (en wsgi.py) y el AppConfig resultante se pasa a create_app().
#
# Comando: export SHOP_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
# ==============================================================================

import os
from dataclasses import dataclass
from typing import Optional

BASE = os.path.dirname(os.path.abspath(__file__))

_DEFAULT_SECRET = "app_shop_dev_secret_key_change_in_production"


@dataclass
class AppConfig:
    """Valores de configuración de una instancia de la app."""
    secret_key: str = _DEFAULT_SECRET
    data_dir: str = os.path.join(BASE, 'data')
    production: bool = True
    token_expire_minutes: int = 720
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None
    admin_name: str = 'Admin'
    profiling: bool = True
    logs_dir: str = os.path.join(BASE, 'logs')
    host: str = '0.0.0.0'
    port: int = 5000
    debug: bool = False

    @property
    def has_admin_bootstrap(self) -> bool:
        return bool(self.admin_email and self.admin_password)


def _flag(env, name, default):
    return env.get(name, default) == '1'


def load_config(environ=None) -> AppConfig:
    """
    Construye la configuración desde el entorno.

    Args:
        environ: Mapeo alternativo a os.environ (para tests)

    Returns:
        AppConfig listo para create_app()
    """
    env = os.environ if environ is None else environ

    production = _flag(env, 'SHOP_PRODUCTION', '1')
    secret = env.get('SHOP_SECRET_KEY')
    if production and not secret:
        print("[ADVERTENCIA] SHOP_PRODUCTION activo sin SHOP_SECRET_KEY definida")
        print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

    return AppConfig(
        secret_key=secret or _DEFAULT_SECRET,
        data_dir=env.get('SHOP_DATA_DIR') or os.path.join(BASE, 'data'),
        production=production,
        token_expire_minutes=int(env.get('SHOP_TOKEN_EXPIRE_MINUTES', 720)),
        admin_email=env.get('SHOP_ADMIN_EMAIL') or None,
        admin_password=env.get('SHOP_ADMIN_PASSWORD') or None,
        admin_name=env.get('SHOP_ADMIN_NAME', 'Admin'),
        profiling=_flag(env, 'SHOP_PROFILING', '1'),
        logs_dir=env.get('SHOP_LOGS_DIR') or os.path.join(BASE, 'logs'),
        host=env.get('FLASK_HOST', '0.0.0.0'),
        port=int(env.get('FLASK_PORT', 5000)),
        debug=_flag(env, 'FLASK_DEBUG', '0'),
    )
