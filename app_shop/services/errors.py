# ==============================================================================
# ERRORES DE NEGOCIO
# ==============================================================================
# Los servicios lanzan estas excepciones; las rutas NO las capturan.
# El manejador de errores de la app (main.py) las traduce a
# {"success": false, "message": ...} con el código HTTP de cada clase.
# ==============================================================================


class ShopError(Exception):
    """Excepción base de la tienda."""
    status_code = 500

    def __init__(self, message: str = 'Server Error'):
        super().__init__(message)
        self.message = message


class InvalidInputError(ShopError):
    """Datos de entrada inválidos (falta un campo, tipo incorrecto, etc.)."""
    status_code = 400


class InsufficientStockError(InvalidInputError):
    """Se pidió más cantidad de la disponible en stock."""

    def __init__(self, product_name: str, available: int):
        super().__init__(
            f"Not enough stock for product: {product_name}. Available: {available}"
        )
        self.product_name = product_name
        self.available = available


class ConflictError(ShopError):
    """Registro duplicado (nombre de producto, email de usuario)."""
    status_code = 400


class UnauthenticatedError(ShopError):
    """No hay token, o el token no es válido."""
    status_code = 401


class ForbiddenError(ShopError):
    """El usuario está autenticado pero no tiene permiso."""
    status_code = 403


class NotFoundError(ShopError):
    """El registro solicitado no existe."""
    status_code = 404
