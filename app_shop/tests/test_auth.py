# -*- coding: utf-8 -*-
"""
Tests de autenticación: registro, login, tokens y bootstrap del admin.
"""
from datetime import datetime, timedelta, timezone

from jose import jwt
from werkzeug.security import check_password_hash

from app_shop.config import AppConfig
from app_shop.main import create_app
from app_shop.models import AuditType

from conftest import PASSWORD, bearer


def test_register_returns_token_and_customer_role(client):
    r = client.post('/api/auth/register', json={
        'name': 'Ana', 'email': 'Ana@Shop.test', 'password': PASSWORD
    })
    assert r.status_code == 201
    body = r.get_json()
    assert body['success'] is True
    data = body['data']
    assert data['email'] == 'ana@shop.test'
    assert data['role'] == 'customer'
    assert data['token']
    assert 'password' not in data


def test_register_ignores_role_in_body(client):
    r = client.post('/api/auth/register', json={
        'name': 'Eve', 'email': 'eve@shop.test', 'password': PASSWORD, 'role': 'admin'
    })
    assert r.status_code == 201
    assert r.get_json()['data']['role'] == 'customer'


def test_register_duplicate_email_is_conflict(client, register_customer):
    register_customer('ana@shop.test')
    r = client.post('/api/auth/register', json={
        'name': 'Otra', 'email': 'ANA@shop.test', 'password': PASSWORD
    })
    assert r.status_code == 400
    assert r.get_json() == {'success': False, 'message': 'User already exists'}


def test_register_validates_fields(client):
    r = client.post('/api/auth/register', json={'name': 'Ana', 'email': 'nope', 'password': PASSWORD})
    assert r.status_code == 400
    r = client.post('/api/auth/register', json={'name': 'Ana', 'email': 'a@b.c', 'password': '123'})
    assert r.status_code == 400
    r = client.post('/api/auth/register', data='not json', content_type='text/plain')
    assert r.status_code == 400
    assert r.get_json()['success'] is False


def test_password_is_stored_hashed(client, container, register_customer):
    user_id, _ = register_customer()
    stored = container.user_repo.get_user(user_id)
    assert stored['password'] != PASSWORD
    assert check_password_hash(stored['password'], PASSWORD)


def test_login_round_trip(client, register_customer):
    user_id, _ = register_customer()
    r = client.post('/api/auth/login', json={'email': 'ana@shop.test', 'password': PASSWORD})
    assert r.status_code == 200
    data = r.get_json()['data']
    assert data['_id'] == user_id
    assert data['role'] == 'customer'


def test_login_wrong_password_is_401(client, register_customer):
    register_customer()
    r = client.post('/api/auth/login', json={'email': 'ana@shop.test', 'password': 'wrong-one'})
    assert r.status_code == 401
    assert r.get_json()['message'] == 'Invalid email or password'

    r = client.post('/api/auth/login', json={'email': 'nobody@shop.test', 'password': PASSWORD})
    assert r.status_code == 401


def test_login_missing_fields_is_400(client):
    r = client.post('/api/auth/login', json={'email': 'ana@shop.test'})
    assert r.status_code == 400


def test_missing_token_is_401(client):
    r = client.get('/api/orders')
    assert r.status_code == 401
    assert r.get_json() == {'success': False, 'message': 'Not authorized, no token'}


def test_invalid_token_is_401(client):
    r = client.get('/api/orders', headers=bearer('garbage.token.value'))
    assert r.status_code == 401
    assert r.get_json()['message'] == 'Not authorized, token failed'


def test_expired_token_is_401(client, config, register_customer):
    user_id, _ = register_customer()
    expired = jwt.encode(
        {'sub': str(user_id), 'role': 'customer',
         'exp': datetime.now(timezone.utc) - timedelta(minutes=1)},
        config.secret_key,
        algorithm='HS256'
    )
    r = client.get('/api/orders', headers=bearer(expired))
    assert r.status_code == 401


def test_token_signed_with_other_key_is_401(client, register_customer):
    user_id, _ = register_customer()
    forged = jwt.encode({'sub': str(user_id), 'role': 'admin'}, 'other-key', algorithm='HS256')
    r = client.get('/api/orders', headers=bearer(forged))
    assert r.status_code == 401


def test_role_comes_from_stored_user_not_token(client, config, register_customer):
    user_id, _ = register_customer()
    # Token válido que dice admin, pero el usuario guardado es cliente
    token = jwt.encode(
        {'sub': str(user_id), 'role': 'admin',
         'exp': datetime.now(timezone.utc) + timedelta(minutes=5)},
        config.secret_key,
        algorithm='HS256'
    )
    r = client.post('/api/products/create', json={
        'name': 'X', 'description': 'x', 'price': 1, 'stock': 1
    }, headers=bearer(token))
    assert r.status_code == 403


def test_registration_and_login_are_audited(client, container, register_customer):
    register_customer()
    client.post('/api/auth/login', json={'email': 'ana@shop.test', 'password': PASSWORD})
    logs = container.audit_service.get_by_type(AuditType.USER)
    assert len(logs) == 2


def test_admin_bootstrap_from_config(tmp_path):
    config = AppConfig(
        secret_key='test-secret',
        data_dir=str(tmp_path / 'data'),
        production=False,
        logs_dir=str(tmp_path / 'logs'),
        admin_email='boss@shop.test',
        admin_password=PASSWORD,
    )
    app = create_app(config)
    # Una segunda app sobre los mismos datos no duplica la cuenta
    create_app(config)

    users = app.extensions['container'].user_repo.find_all_by('role', 'admin')
    assert len(users) == 1

    client = app.test_client()
    r = client.post('/api/auth/login', json={'email': 'boss@shop.test', 'password': PASSWORD})
    assert r.status_code == 200
    assert r.get_json()['data']['role'] == 'admin'
