# -*- coding: utf-8 -*-
"""
Tests de repositorios JSON: persistencia, claves int y descuento condicional.
"""
import json
import os

import pytest

from app_shop.repositories import (
    AuditRepository,
    IAuditRepository,
    IOrderRepository,
    IProductRepository,
    IUserRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
)


@pytest.fixture
def products(tmp_path):
    return ProductRepository(str(tmp_path))


def _product(name='Lamp', stock=10):
    return {'name': name, 'description': 'd', 'price': 5, 'stock': stock, 'lowStockThreshold': 2}


def test_file_is_created_empty(tmp_path):
    ProductRepository(str(tmp_path / 'nested'))
    with open(tmp_path / 'nested' / 'products.json', encoding='utf-8') as f:
        assert json.load(f) == {}


def test_ids_are_sequential_ints_and_persisted(tmp_path, products):
    first, _ = products.create_product(_product('Lamp'))
    second, record = products.create_product(_product('Desk'))
    assert (first, second) == (1, 2)
    assert record['createdAt'] == record['updatedAt']

    with open(tmp_path / 'products.json', encoding='utf-8') as f:
        raw = json.load(f)
    assert set(raw) == {'1', '2', '_meta'}
    assert raw['_meta'] == {'nextId': 3}

    reopened = ProductRepository(str(tmp_path))
    assert reopened.get_product(2)['name'] == 'Desk'
    assert [pid for pid, _ in reopened.get_all_products()] == [1, 2]


def test_next_id_after_delete_uses_max(products):
    products.create_product(_product('Lamp'))
    pid, _ = products.create_product(_product('Desk'))
    products.delete_product(1)
    assert not products.product_exists(1)
    new_id, _ = products.create_product(_product('Chair'))
    assert new_id == pid + 1


def test_deleted_highest_id_is_never_reused(tmp_path, products):
    products.create_product(_product('Lamp'))
    pid, _ = products.create_product(_product('Desk'))
    products.delete_product(pid)
    products.update_product(1, {'price': 6})

    new_id, _ = products.create_product(_product('Sofa'))
    assert new_id == pid + 1
    # El contador sobrevive a reabrir el archivo
    reopened = ProductRepository(str(tmp_path))
    reopened.delete_product(new_id)
    assert reopened.create_product(_product('Chair'))[0] == new_id + 1


def test_next_id_without_counter_falls_back_to_max(tmp_path, products):
    with open(tmp_path / 'products.json', 'w', encoding='utf-8') as f:
        json.dump({'4': _product()}, f)
    assert products.get_next_id() == 5


def test_update_merges_fields(products):
    pid, _ = products.create_product(_product())
    updated = products.update_product(pid, {'price': 7})
    assert updated['price'] == 7
    assert updated['name'] == 'Lamp'
    assert products.update_product(99, {'price': 1}) is None


def test_decrement_stock_is_conditional(products):
    pid, _ = products.create_product(_product(stock=5))
    assert products.decrement_stock(pid, 3)['stock'] == 2
    assert products.decrement_stock(pid, 3) is None
    assert products.get_product(pid)['stock'] == 2
    assert products.decrement_stock(pid, 2)['stock'] == 0
    assert products.decrement_stock(404, 1) is None


def test_low_stock_products(products):
    products.create_product(_product('Lamp', stock=2))
    products.create_product(_product('Desk', stock=3))
    assert [data['name'] for _, data in products.get_low_stock_products()] == ['Lamp']


def test_corrupt_file_reads_as_empty(tmp_path, products):
    with open(os.path.join(str(tmp_path), 'products.json'), 'w', encoding='utf-8') as f:
        f.write('{not json')
    assert products.get_all_products() == []
    pid, _ = products.create_product(_product())
    assert pid == 1


def test_non_numeric_keys_are_ignored(tmp_path, products):
    with open(tmp_path / 'products.json', 'w', encoding='utf-8') as f:
        json.dump({'3': _product(), 'meta': {'x': 1}}, f)
    assert [pid for pid, _ in products.get_all_products()] == [3]


def test_users_lookup_by_email_is_case_insensitive(tmp_path):
    users = UserRepository(str(tmp_path))
    uid, record = users.create_user('Ana', ' Ana@Shop.TEST ', 'hash')
    assert record['email'] == 'ana@shop.test'
    assert users.get_by_email('ANA@shop.test')[0] == uid
    assert users.user_exists('nobody@shop.test') is False


def test_audit_log_newest_first(tmp_path):
    audit = AuditRepository(str(tmp_path))
    audit.log('PRODUCT', 'admin', 'first', 1)
    audit.log('STOCK', 'admin', 'second', 1)
    recent = audit.get_recent_logs(10)
    assert [e['message'] for e in recent] == ['second', 'first']
    assert audit.get_logs_by_type('STOCK')[0]['related_id'] == '1'
    assert len(audit.get_logs_by_related_id(1)) == 2


def test_json_repositories_satisfy_interfaces(tmp_path, products):
    assert isinstance(products, IProductRepository)
    assert isinstance(OrderRepository(str(tmp_path)), IOrderRepository)
    assert isinstance(UserRepository(str(tmp_path)), IUserRepository)
    assert isinstance(AuditRepository(str(tmp_path)), IAuditRepository)


def test_container_wires_repositories_through_interfaces(container):
    assert isinstance(container.product_service.product_repo, IProductRepository)
    assert isinstance(container.order_service.order_repo, IOrderRepository)
    assert isinstance(container.user_service.user_repo, IUserRepository)
    assert isinstance(container.audit_service.audit_repo, IAuditRepository)
