# -*- coding: utf-8 -*-
"""
Fixtures compartidas: cada test arma su propia app sobre un directorio temporal.
"""
import pytest

from app_shop.config import AppConfig
from app_shop.main import create_app
from app_shop.models import UserRole

PASSWORD = 'secret123'


@pytest.fixture
def config(tmp_path):
    return AppConfig(
        secret_key='test-secret',
        data_dir=str(tmp_path / 'data'),
        production=False,
        logs_dir=str(tmp_path / 'logs'),
    )


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def container(app):
    return app.extensions['container']


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(client, container):
    container.user_service.register(
        {'name': 'Admin', 'email': 'admin@shop.test', 'password': PASSWORD},
        role=UserRole.ADMIN
    )
    r = client.post('/api/auth/login', json={'email': 'admin@shop.test', 'password': PASSWORD})
    assert r.status_code == 200
    return bearer(r.get_json()['data']['token'])


@pytest.fixture
def register_customer(client):
    """Registra un cliente por la API y devuelve (id, headers)."""
    def _register(email='ana@shop.test', name='Ana'):
        r = client.post(
            '/api/auth/register',
            json={'name': name, 'email': email, 'password': PASSWORD}
        )
        assert r.status_code == 201, r.get_json()
        data = r.get_json()['data']
        return data['_id'], bearer(data['token'])
    return _register


@pytest.fixture
def make_product(client, admin_headers):
    """Crea un producto como admin y devuelve el body de la respuesta."""
    def _make(name='Widget', price=10, stock=10, **extra):
        body = {'name': name, 'description': f'{name} description', 'price': price, 'stock': stock}
        body.update(extra)
        r = client.post('/api/products/create', json=body, headers=admin_headers)
        assert r.status_code == 201, r.get_json()
        return r.get_json()['data']
    return _make
