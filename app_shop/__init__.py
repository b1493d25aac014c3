"""
app_shop - API REST de tienda (catálogo, stock y pedidos).

Uso:
    from app_shop.main import create_app
    app = create_app()
"""

__version__ = '1.0.0'
