# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar la experiencia del usuario.
# Guarda logs legibles en logs/ para análisis humano.
#
# ACTIVAR/DESACTIVAR: init_profiling(app, enabled=...) o SHOP_PROFILING=0
# Cada app guarda su configuración en app.config; fuera de una app
# se usan los valores por defecto de este módulo.
# ==============================================================================

import os
import time
import threading
from datetime import datetime
from functools import wraps
from collections import defaultdict

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

# Valores por defecto (fuera de un contexto de app)
ENABLE_PROFILING = True

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

# Directorio de logs por defecto
LOGS_DIR = os.path.join(os.path.dirname(__file__), 'logs')

# Nombres de archivo de log
PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    # Autenticación
    'POST /api/auth/register': 'Registrar usuario',
    'POST /api/auth/login': 'Iniciar sesión',

    # Catálogo
    'GET /api/products': 'Listar productos',
    'GET /api/products/<int:pid>': 'Ver producto',
    'POST /api/products/create': 'Crear producto',
    'PUT /api/products/<int:pid>': 'Editar producto',
    'DELETE /api/products/<int:pid>': 'Eliminar producto',
    'PUT /api/products/<int:pid>/stock': 'Ajustar stock',

    # Pedidos
    'POST /api/orders/placeorder': 'Crear pedido',
    'GET /api/orders': 'Listar pedidos',
    'GET /api/orders/<int:order_id>': 'Ver pedido',
    'PUT /api/orders/<int:order_id>/status': 'Cambiar estado pedido',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


# Claves en app.config
CONFIG_ENABLED = 'PROFILING_ENABLED'
CONFIG_LOGS_DIR = 'PROFILING_LOGS_DIR'


def _settings():
    """
    Devuelve (enabled, logs_dir) de la app activa.
    Sin contexto de app se usan ENABLE_PROFILING y LOGS_DIR.
    """
    from flask import current_app, has_app_context

    if not has_app_context():
        return ENABLE_PROFILING, LOGS_DIR
    config = current_app.config
    return (
        config.get(CONFIG_ENABLED, ENABLE_PROFILING),
        config.get(CONFIG_LOGS_DIR, LOGS_DIR),
    )


def _is_enabled():
    return _settings()[0]


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    """Obtiene timestamp legible"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename, content, logs_dir=None):
    """Escribe contenido a un archivo de log (thread-safe)"""
    if logs_dir is None:
        logs_dir = _settings()[1]
    try:
        with _write_lock:
            os.makedirs(logs_dir, exist_ok=True)
            with open(os.path.join(logs_dir, filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError as e:
        print(f"[ADVERTENCIA] No se pudo escribir {filename}: {e}")


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Intenta hacer match con ROUTE_NAMES, si no, devuelve la ruta raw.
    """
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]

    # Con la regla de Flask hay match exacto también para rutas con parámetros
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]

    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, status=None, user=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/api/orders/3)
        rule: Regla de Flask (/api/orders/<int:order_id>)
        time_ms: Tiempo en milisegundos
        status: Código HTTP de la respuesta
        user: Usuario que hizo la petición (opcional)
    """
    if not _is_enabled():
        return

    action_name = _get_route_name(method, path, rule)
    user_str = user or 'anónimo'

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {action_name}
Usuario: {user_str}
Ruta: {method} {path}
Estado: {status}
Tiempo: {time_ms:.0f} ms
"""

    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra una ruta lenta en slow_routes.log

    Args:
        level: 'WARNING' (>300ms) o 'CRITICAL' (>700ms)
    """
    if not _is_enabled():
        return

    action_name = _get_route_name(method, path, rule)
    user_str = user or 'anónimo'
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL

    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {action_name}
Usuario: {user_str}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""

    _write_log(SLOW_ROUTES_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app, enabled=None, logs_dir=None):
    """
    Inicializa el sistema de profiling en una app Flask.
    Registra hooks before_request y after_request.

    Args:
        app: App Flask
        enabled: Activa o desactiva el profiling solo para esta app
        logs_dir: Directorio de logs solo para esta app

    Uso:
        from app_shop.performance_logger import init_profiling
        init_profiling(app, enabled=True, logs_dir='logs')
    """
    app.config[CONFIG_ENABLED] = ENABLE_PROFILING if enabled is None else bool(enabled)
    app.config[CONFIG_LOGS_DIR] = LOGS_DIR if logs_dir is None else logs_dir

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not _is_enabled() or not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms

        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        caller = getattr(g, 'current_user', None)
        user = caller.email if caller is not None else None

        log_route_performance(method, path, rule, elapsed, response.status_code, user)

        # Detectar rutas lentas
        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Crear pedido")
        def place_order():
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not _is_enabled():
                return fn(*args, **kwargs)

            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                # Si es muy lenta, loguear inmediatamente
                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'

    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""

    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def write_function_stats_report(logs_dir=None):
    """
    Escribe un reporte legible de estadísticas de funciones en slow_functions.log

    Args:
        logs_dir: Directorio destino (por defecto, el de la app activa)
    """
    stats = get_function_stats()
    if not _is_enabled() or not stats:
        return

    # Ordenar por tiempo promedio (mayor primero)
    sorted_stats = sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True)

    report = f"""
REPORTE DE RENDIMIENTO DE FUNCIONES
Generado: {_get_timestamp()}

"""

    for func_name, data in sorted_stats:
        status = ''
        if data['avg_time'] >= THRESHOLD_CRITICAL:
            status = ' [CRÍTICO]'
        elif data['avg_time'] >= THRESHOLD_WARNING:
            status = ' [LENTO]'
        elif data['max_time'] >= THRESHOLD_CRITICAL:
            status = ' [PICOS ALTOS]'

        report += f"""FUNCIÓN: {func_name}{status}
  Llamadas totales: {data['calls']}
  Tiempo promedio:  {data['avg_time']:.0f} ms
  Tiempo máximo:    {data['max_time']:.0f} ms

"""

    _write_log(SLOW_FUNCTIONS_LOG, report, logs_dir)


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'write_function_stats_report',
    'reset_stats',
]
