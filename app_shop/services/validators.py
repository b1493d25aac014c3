# ==============================================================================
# VALIDACIONES
# ==============================================================================
# Funciones puras que se ejecutan ANTES de cualquier escritura.
# Devuelven los datos limpios o lanzan InvalidInputError.
# ==============================================================================

import math
from typing import Any, Dict, List

from app_shop.models import DEFAULT_LOW_STOCK_THRESHOLD, OrderStatus
from app_shop.services.errors import InvalidInputError


# Campos editables de un producto (nombre en la API)
PRODUCT_FIELDS = ('name', 'description', 'price', 'stock', 'lowStockThreshold')


def is_int(value: Any) -> bool:
    """True para enteros reales (bool no cuenta)."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    """True para int/float finitos (NaN e Infinity no cuentan)."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def _require_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"Please add a product {field}")
    return value.strip()


def _require_non_negative_int(field: str, value: Any) -> int:
    if not is_int(value):
        raise InvalidInputError(f"{field} must be an integer")
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative")
    return value


def _validate_product_field(field: str, value: Any) -> Any:
    if field in ('name', 'description'):
        return _require_text(field, value)
    if field == 'price':
        if not is_number(value):
            raise InvalidInputError("price must be a number")
        if value < 0:
            raise InvalidInputError("price cannot be negative")
        return value
    # stock y lowStockThreshold
    return _require_non_negative_int(field, value)


def validate_new_product(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida los datos de un producto nuevo.

    Args:
        data: Body recibido (name, description, price, stock, lowStockThreshold)

    Returns:
        Dict limpio con los cinco campos

    Raises:
        InvalidInputError: Si falta un campo requerido o es inválido
    """
    cleaned = {}
    for field in ('name', 'description', 'price', 'stock'):
        if data.get(field) is None:
            raise InvalidInputError(f"Please add a product {field}")
        cleaned[field] = _validate_product_field(field, data[field])

    threshold = data.get('lowStockThreshold')
    if threshold is None:
        cleaned['lowStockThreshold'] = DEFAULT_LOW_STOCK_THRESHOLD
    else:
        cleaned['lowStockThreshold'] = _validate_product_field('lowStockThreshold', threshold)
    return cleaned


def validate_product_updates(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Valida una actualización parcial.
    Solo se consideran los campos PRESENTES en el body; un campo presente
    con valor vacío o falso (0, "") se valida y se aplica igual.
    Campos desconocidos se ignoran.

    Returns:
        Dict con los campos a aplicar (puede estar vacío)
    """
    return {
        field: _validate_product_field(field, data[field])
        for field in PRODUCT_FIELDS
        if field in data
    }


def validate_stock(data: Dict[str, Any]) -> int:
    """Valida el body de actualización de stock."""
    if 'stock' not in data:
        raise InvalidInputError("Please add stock quantity")
    return _require_non_negative_int('stock', data['stock'])


def validate_order_items(order_items: Any) -> List[Dict[str, int]]:
    """
    Valida la lista de items de un pedido, sin tocar ningún repositorio.

    Args:
        order_items: Lista [{product, quantity}]

    Returns:
        Lista normalizada [{product: int, quantity: int}]

    Raises:
        InvalidInputError: Lista vacía o item mal formado
    """
    if not order_items or not isinstance(order_items, list):
        raise InvalidInputError("No order items")

    items = []
    for position, item in enumerate(order_items, start=1):
        if not isinstance(item, dict):
            raise InvalidInputError(f"Order item {position} is invalid")
        product = item.get('product')
        quantity = item.get('quantity')
        if not is_int(product):
            raise InvalidInputError(f"Order item {position}: invalid product id")
        if not is_int(quantity) or quantity <= 0:
            raise InvalidInputError(
                f"Order item {position}: quantity must be a positive integer"
            )
        items.append({'product': product, 'quantity': quantity})
    return items


def validate_status(status: Any) -> OrderStatus:
    """
    Valida un estado de pedido.

    Raises:
        InvalidInputError: Si no es Pending, Shipped o Delivered
    """
    try:
        return OrderStatus(status)
    except (ValueError, TypeError):
        raise InvalidInputError("Invalid status")


def validate_registration(data: Dict[str, Any]) -> Dict[str, str]:
    """Valida los datos de registro (name, email, password)."""
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')

    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Please add a name")
    if not isinstance(email, str) or '@' not in email:
        raise InvalidInputError("Please add a valid email")
    if not isinstance(password, str) or len(password) < 6:
        raise InvalidInputError("Password must be at least 6 characters")

    return {
        'name': name.strip(),
        'email': email.strip().lower(),
        'password': password,
    }
