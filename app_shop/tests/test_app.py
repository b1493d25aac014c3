# -*- coding: utf-8 -*-
"""
Tests de la app: health check, rutas desconocidas, errores, headers y profiling.
"""
import dataclasses
import os

from app_shop import performance_logger
from app_shop.config import load_config
from app_shop.main import create_app


def test_health(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.get_json() == {'success': True, 'data': {'name': 'app_shop', 'status': 'ok'}}


def test_unknown_route_is_404_envelope(client):
    r = client.get('/api/nothing-here')
    assert r.status_code == 404
    assert r.get_json() == {'success': False, 'message': 'Route not found'}


def test_unsupported_method_is_404(client):
    r = client.patch('/api/products')
    assert r.status_code == 404
    assert r.get_json()['message'] == 'Route not found'


def test_non_int_id_is_route_not_found(client):
    r = client.get('/api/products/abc')
    assert r.status_code == 404
    assert r.get_json()['message'] == 'Route not found'


def test_security_headers(client):
    r = client.get('/')
    assert r.headers['X-Frame-Options'] == 'DENY'
    assert r.headers['X-Content-Type-Options'] == 'nosniff'


def _boom():
    raise RuntimeError('disk on fire')


def test_unexpected_error_shows_message_outside_production(client, container, monkeypatch):
    monkeypatch.setattr(container.product_service, 'list_products', _boom)
    r = client.get('/api/products')
    assert r.status_code == 500
    assert r.get_json() == {'success': False, 'message': 'disk on fire'}


def test_unexpected_error_is_generic_in_production(config, monkeypatch):
    app = create_app(dataclasses.replace(config, production=True))
    monkeypatch.setattr(app.extensions['container'].product_service, 'list_products', _boom)
    r = app.test_client().get('/api/products')
    assert r.status_code == 500
    assert r.get_json() == {'success': False, 'message': 'Server Error'}


def test_each_app_has_its_own_data(tmp_path, config, make_product):
    make_product('Lamp')
    other = create_app(dataclasses.replace(config, data_dir=str(tmp_path / 'other')))
    assert other.test_client().get('/api/products').get_json()['count'] == 0


def test_route_timings_are_logged(client, config):
    client.get('/api/products')
    log_path = os.path.join(config.logs_dir, 'performance.log')
    with open(log_path, encoding='utf-8') as f:
        text = f.read()
    assert 'Acción: Listar productos' in text
    assert 'Estado: 200' in text


def test_profiled_functions_collect_stats(client, register_customer, make_product):
    performance_logger.reset_stats()
    _, headers = register_customer()
    lamp = make_product('Lamp')
    client.post('/api/orders/placeorder',
                json={'orderItems': [{'product': lamp['_id'], 'quantity': 1}]},
                headers=headers)
    client.get('/api/products')

    stats = performance_logger.get_function_stats()
    assert stats['Crear pedido']['calls'] >= 1
    assert stats['Listar productos']['calls'] >= 1


def test_profiling_can_be_disabled(config):
    app = create_app(dataclasses.replace(config, profiling=False))
    app.test_client().get('/')
    assert not os.path.exists(os.path.join(config.logs_dir, 'performance.log'))


def test_load_config_from_environment(tmp_path, capsys):
    config = load_config({
        'SHOP_DATA_DIR': str(tmp_path),
        'SHOP_TOKEN_EXPIRE_MINUTES': '5',
        'SHOP_PROFILING': '0',
        'FLASK_PORT': '8080',
    })
    assert config.data_dir == str(tmp_path)
    assert config.token_expire_minutes == 5
    assert config.profiling is False
    assert config.port == 8080
    assert config.production is True
    assert '[ADVERTENCIA]' in capsys.readouterr().out

    config = load_config({'SHOP_PRODUCTION': '0', 'SHOP_SECRET_KEY': 'k'})
    assert config.production is False
    assert config.secret_key == 'k'
    assert config.has_admin_bootstrap is False


def test_function_stats_report_is_written(app, client, config):
    client.get('/api/products')
    with app.app_context():
        performance_logger.write_function_stats_report()
    with open(os.path.join(config.logs_dir, 'slow_functions.log'), encoding='utf-8') as f:
        assert 'FUNCIÓN: Listar productos' in f.read()


def test_profiling_settings_are_per_app(tmp_path, config):
    first = create_app(config)
    quiet_logs = str(tmp_path / 'quiet_logs')
    create_app(dataclasses.replace(config, data_dir=str(tmp_path / 'quiet'),
                                   logs_dir=quiet_logs, profiling=False))

    # Crear la segunda app no cambia el destino ni el estado de la primera
    first.test_client().get('/api/products')
    assert os.path.exists(os.path.join(config.logs_dir, 'performance.log'))
    assert not os.path.exists(quiet_logs)


def test_stats_report_outside_app_goes_to_given_dir(tmp_path, client):
    client.get('/api/products')
    target = str(tmp_path / 'report')
    performance_logger.write_function_stats_report(logs_dir=target)
    with open(os.path.join(target, 'slow_functions.log'), encoding='utf-8') as f:
        assert 'FUNCIÓN: Listar productos' in f.read()
