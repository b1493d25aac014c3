from functools import wraps

from flask import Flask, current_app, g, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from app_shop.app_container import AppContainer
from app_shop.config import AppConfig, load_config
from app_shop.models import UserRole
from app_shop.performance_logger import init_profiling
from app_shop.services import ShopError, require_role

APP_NAME = 'app_shop'


# ═══════════════════════════════════════════════════════════════════════════
# HELPERS DE PETICIÓN / RESPUESTA
# ═══════════════════════════════════════════════════════════════════════════

def get_container() -> AppContainer:
    """Contenedor de la app que atiende la petición actual."""
    return current_app.extensions['container']


def json_body():
    """Body JSON de la petición; cualquier otra cosa cuenta como {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def ok(data=None, status=200, **extra):
    body = {'success': True}
    body.update(extra)
    if data is not None:
        body['data'] = data
    return body, status


def fail(message, status):
    return {'success': False, 'message': message}, status


def _bearer_token():
    auth = request.headers.get('Authorization', '')
    if auth.startswith('Bearer '):
        return auth[len('Bearer '):].strip() or None
    return None


# ═══════════════════════════════════════════════════════════════════════════
# DECORADORES DE ACCESO
# ═══════════════════════════════════════════════════════════════════════════

def login_required(f):
    """Exige un token Bearer válido y deja el usuario en g.current_user."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        g.current_user = get_container().user_service.authenticate_token(_bearer_token())
        return f(*args, **kwargs)
    return wrapper


def role_required(*roles):
    """Restringe la ruta a los roles dados. Va debajo de @login_required."""
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            require_role(g.current_user.role, roles)
            return f(*args, **kwargs)
        return wrapper
    return deco


# ═══════════════════════════════════════════════════════════════════════════
# RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def register_routes(app):

    @app.route('/', methods=['GET'])
    def health():
        return ok({'name': APP_NAME, 'status': 'ok'})

    # -----------------------------------------------------------------------
    # Autenticación
    # -----------------------------------------------------------------------

    @app.route('/api/auth/register', methods=['POST'])
    def register():
        users = get_container().user_service
        # Por la API solo se registran clientes
        user = users.register(json_body())
        return ok(users.auth_response(user), 201)

    @app.route('/api/auth/login', methods=['POST'])
    def login():
        users = get_container().user_service
        user = users.login(json_body())
        return ok(users.auth_response(user))

    # -----------------------------------------------------------------------
    # Catálogo
    # -----------------------------------------------------------------------

    @app.route('/api/products', methods=['GET'])
    def list_products():
        products = get_container().product_service.list_products()
        return ok([p.to_public_dict() for p in products], count=len(products))

    @app.route('/api/products/<int:pid>', methods=['GET'])
    def get_product(pid):
        product = get_container().product_service.get_product(pid)
        return ok(product.to_public_dict())

    @app.route('/api/products/create', methods=['POST'])
    @login_required
    @role_required(UserRole.ADMIN)
    def create_product():
        product = get_container().product_service.create_product(
            json_body(), g.current_user.email
        )
        return ok(product.to_public_dict(), 201)

    @app.route('/api/products/<int:pid>', methods=['PUT'])
    @login_required
    @role_required(UserRole.ADMIN)
    def update_product(pid):
        product = get_container().product_service.update_product(
            pid, json_body(), g.current_user.email
        )
        return ok(product.to_public_dict())

    @app.route('/api/products/<int:pid>', methods=['DELETE'])
    @login_required
    @role_required(UserRole.ADMIN)
    def delete_product(pid):
        get_container().product_service.delete_product(pid, g.current_user.email)
        return ok(message='Product removed')

    @app.route('/api/products/<int:pid>/stock', methods=['PUT'])
    @login_required
    @role_required(UserRole.ADMIN)
    def update_stock(pid):
        product = get_container().product_service.update_stock(
            pid, json_body(), g.current_user.email
        )
        return ok(product.to_public_dict())

    # -----------------------------------------------------------------------
    # Pedidos
    # -----------------------------------------------------------------------

    @app.route('/api/orders/placeorder', methods=['POST'])
    @login_required
    @role_required(UserRole.CUSTOMER)
    def place_order():
        caller = g.current_user
        order = get_container().order_service.place_order(
            caller.id, json_body().get('orderItems'), caller.email
        )
        return ok(order.to_public_dict(), 201)

    @app.route('/api/orders', methods=['GET'])
    @login_required
    def list_orders():
        orders = get_container().order_service.get_orders(g.current_user)
        return ok(orders, count=len(orders))

    @app.route('/api/orders/<int:order_id>', methods=['GET'])
    @login_required
    def get_order(order_id):
        order = get_container().order_service.get_order_by_id(g.current_user, order_id)
        return ok(order)

    @app.route('/api/orders/<int:order_id>/status', methods=['PUT'])
    @login_required
    @role_required(UserRole.ADMIN)
    def update_order_status(order_id):
        order = get_container().order_service.update_status(
            order_id, json_body().get('status'), g.current_user.email
        )
        return ok(order.to_public_dict())


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def register_error_handlers(app, config: AppConfig):

    @app.errorhandler(ShopError)
    def handle_shop_error(e):
        return fail(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if isinstance(e, (NotFound, MethodNotAllowed)):
            return fail('Route not found', 404)
        return fail(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        print(f"[ERROR] {request.method} {request.path}: {e!r}")
        message = 'Server Error' if config.production else (str(e) or 'Server Error')
        return fail(message, 500)


def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


# ═══════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APP
# ═══════════════════════════════════════════════════════════════════════════

def create_app(config: AppConfig = None) -> Flask:
    """
    Crea la app Flask con su propio contenedor de dependencias.

    Args:
        config: Configuración; si falta se lee del entorno

    Returns:
        App lista para servir (o para app.test_client())
    """
    config = config or load_config()

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024  # 1 MB
    app.config['SHOP_CONFIG'] = config

    container = AppContainer(config)
    app.extensions['container'] = container

    # Profiling de rutas y funciones. Logs en config.logs_dir
    init_profiling(app, enabled=config.profiling, logs_dir=config.logs_dir)

    app.after_request(set_security_headers)
    register_routes(app)
    register_error_handlers(app, config)

    if config.has_admin_bootstrap:
        container.user_service.ensure_admin(
            config.admin_email, config.admin_password, config.admin_name
        )

    return app
