# -*- coding: utf-8 -*-
"""
Tests del catálogo: CRUD, ajuste de stock y alertas de stock bajo.
"""
import pytest


def test_list_products_is_public_and_counts(client, make_product):
    make_product('Lamp')
    make_product('Desk')
    r = client.get('/api/products')
    assert r.status_code == 200
    body = r.get_json()
    assert body['success'] is True
    assert body['count'] == 2
    assert [p['name'] for p in body['data']] == ['Lamp', 'Desk']


def test_create_product_response_shape(make_product):
    product = make_product('Lamp', price=19.5, stock=8)
    assert product['_id'] == 1
    assert 'id' not in product
    assert product['price'] == 19.5
    assert product['stock'] == 8
    assert product['lowStockThreshold'] == 5
    assert product['createdAt'] and product['updatedAt']


def test_get_product_by_id(client, make_product):
    created = make_product('Lamp')
    r = client.get(f"/api/products/{created['_id']}")
    assert r.status_code == 200
    assert r.get_json()['data']['name'] == 'Lamp'


def test_get_missing_product_is_404(client):
    r = client.get('/api/products/99')
    assert r.status_code == 404
    assert r.get_json() == {'success': False, 'message': 'Product not found'}


def test_create_requires_admin(client, register_customer):
    _, headers = register_customer()
    r = client.post('/api/products/create', json={
        'name': 'Lamp', 'description': 'd', 'price': 1, 'stock': 1
    }, headers=headers)
    assert r.status_code == 403
    assert r.get_json()['message'] == 'User role customer is not authorized to access this route'


def test_create_requires_token(client):
    r = client.post('/api/products/create', json={'name': 'Lamp'})
    assert r.status_code == 401


def test_create_missing_field_is_400(client, admin_headers):
    r = client.post('/api/products/create', json={
        'name': 'Lamp', 'description': 'd', 'price': 1
    }, headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Please add a product stock'


def test_create_rejects_negative_values(client, admin_headers):
    r = client.post('/api/products/create', json={
        'name': 'Lamp', 'description': 'd', 'price': -1, 'stock': 1
    }, headers=admin_headers)
    assert r.status_code == 400
    r = client.post('/api/products/create', json={
        'name': 'Lamp', 'description': 'd', 'price': 1, 'stock': 2.5
    }, headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.parametrize('literal', ['NaN', 'Infinity', '-Infinity'])
def test_non_finite_price_is_400(client, admin_headers, make_product, literal):
    body = '{"name": "Lamp", "description": "d", "price": %s, "stock": 1}' % literal
    r = client.post('/api/products/create', data=body,
                    content_type='application/json', headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()['message'] == 'price must be a number'

    desk = make_product('Desk', price=10)
    r = client.put(f"/api/products/{desk['_id']}", data='{"price": %s}' % literal,
                   content_type='application/json', headers=admin_headers)
    assert r.status_code == 400
    assert client.get(f"/api/products/{desk['_id']}").get_json()['data']['price'] == 10


def test_duplicate_name_is_conflict(client, admin_headers, make_product):
    make_product('Lamp')
    r = client.post('/api/products/create', json={
        'name': 'Lamp', 'description': 'd', 'price': 1, 'stock': 1
    }, headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Product already exists'


def test_partial_update_applies_zero_values(client, admin_headers, make_product):
    created = make_product('Lamp', price=10, stock=10)
    r = client.put(f"/api/products/{created['_id']}", json={'stock': 0, 'price': 0},
                   headers=admin_headers)
    assert r.status_code == 200
    data = r.get_json()['data']
    assert data['stock'] == 0
    assert data['price'] == 0
    # Campos omitidos no cambian
    assert data['name'] == 'Lamp'
    assert data['description'] == created['description']


def test_update_rejects_empty_name(client, admin_headers, make_product):
    created = make_product('Lamp')
    r = client.put(f"/api/products/{created['_id']}", json={'name': ''}, headers=admin_headers)
    assert r.status_code == 400
    assert client.get(f"/api/products/{created['_id']}").get_json()['data']['name'] == 'Lamp'


def test_update_rename_to_existing_name_is_conflict(client, admin_headers, make_product):
    make_product('Lamp')
    desk = make_product('Desk')
    r = client.put(f"/api/products/{desk['_id']}", json={'name': 'Lamp'}, headers=admin_headers)
    assert r.status_code == 400
    # Renombrar al mismo nombre no es conflicto
    r = client.put(f"/api/products/{desk['_id']}", json={'name': 'Desk'}, headers=admin_headers)
    assert r.status_code == 200


def test_update_missing_product_is_404(client, admin_headers):
    r = client.put('/api/products/42', json={'price': 1}, headers=admin_headers)
    assert r.status_code == 404


def test_delete_product(client, admin_headers, make_product):
    created = make_product('Lamp')
    r = client.delete(f"/api/products/{created['_id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json() == {'success': True, 'message': 'Product removed'}
    assert client.get(f"/api/products/{created['_id']}").status_code == 404

    r = client.delete(f"/api/products/{created['_id']}", headers=admin_headers)
    assert r.status_code == 404


def test_update_stock_only_touches_stock(client, admin_headers, make_product):
    created = make_product('Lamp', price=10, stock=10)
    r = client.put(f"/api/products/{created['_id']}/stock", json={'stock': 25, 'price': 1},
                   headers=admin_headers)
    assert r.status_code == 200
    data = r.get_json()['data']
    assert data['stock'] == 25
    assert data['price'] == 10


def test_update_stock_validation(client, admin_headers, make_product):
    created = make_product('Lamp')
    url = f"/api/products/{created['_id']}/stock"
    r = client.put(url, json={}, headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Please add stock quantity'
    assert client.put(url, json={'stock': -3}, headers=admin_headers).status_code == 400
    assert client.put('/api/products/77/stock', json={'stock': 3}, headers=admin_headers).status_code == 404


def test_low_stock_alert_on_stock_update(client, container, admin_headers, make_product, capsys):
    created = make_product('Lamp', stock=10, lowStockThreshold=3)
    assert container.audit_service.get_low_stock_alerts() == []

    client.put(f"/api/products/{created['_id']}/stock", json={'stock': 3}, headers=admin_headers)

    alerts = container.audit_service.get_low_stock_alerts()
    assert len(alerts) == 1
    assert alerts[0].related_id == str(created['_id'])
    assert alerts[0].details['stock'] == 3
    assert 'Low stock alert for product: Lamp. Current stock: 3' in capsys.readouterr().out


def test_low_stock_alert_on_create(container, make_product):
    make_product('Lamp', stock=2)
    assert len(container.audit_service.get_low_stock_alerts()) == 1


def test_product_writes_are_audited(client, container, admin_headers, make_product):
    from app_shop.models import AuditType

    created = make_product('Lamp')
    client.put(f"/api/products/{created['_id']}", json={'price': 12}, headers=admin_headers)
    client.delete(f"/api/products/{created['_id']}", headers=admin_headers)

    logs = container.audit_service.get_by_type(AuditType.PRODUCT)
    assert len(logs) == 3
    assert all(log.user == 'admin@shop.test' for log in logs)


def test_product_writes_survive_audit_failure(client, container, admin_headers,
                                             make_product, monkeypatch, capsys):
    def disk_full(*args, **kwargs):
        raise OSError('No space left on device')

    monkeypatch.setattr(container.audit_repo, 'log', disk_full)

    created = make_product('Lamp', stock=2)
    url = f"/api/products/{created['_id']}"
    assert client.put(url, json={'price': 12}, headers=admin_headers).status_code == 200
    assert client.put(f'{url}/stock', json={'stock': 1}, headers=admin_headers).status_code == 200
    assert client.delete(url, headers=admin_headers).status_code == 200
    assert '[ADVERTENCIA]' in capsys.readouterr().out


def test_low_stock_products_and_recent_audit(container, make_product):
    make_product('Lamp', stock=1)
    make_product('Desk', stock=50)
    assert [p.name for p in container.product_service.get_low_stock_products()] == ['Lamp']

    recent = container.audit_service.get_recent(1)
    assert len(recent) == 1
    assert recent[0].details.get('alert') is None
