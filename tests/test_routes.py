"""
End-to-end flows through the FastAPI app with seeded default data.
"""
from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from storefront.app import create_app


@pytest.fixture()
def client(data_dir):
    app = create_app()
    with TestClient(app) as c:
        yield c


def _csrf(client: TestClient) -> str:
    if not client.cookies.get("csrf_token"):
        client.get("/register")
    return client.cookies.get("csrf_token")


def _login(client: TestClient, email: str, password: str, **kwargs):
    token = _csrf(client)
    return client.post("/login", data={"email": email, "password": password, "csrf_token": token}, **kwargs)


def _post(client: TestClient, path: str, data: dict, **kwargs):
    payload = dict(data)
    payload["csrf_token"] = _csrf(client)
    return client.post(path, data=payload, follow_redirects=False, **kwargs)


def _products(client: TestClient):
    return {p.name: p for p in client.app.state.product_service.get_all()}


def test_seed_creates_default_accounts_and_products(client):
    users = client.app.state.user_service
    assert users.find_by_email("admin@uas").is_admin
    assert not users.find_by_email("user@uas").is_admin
    assert set(_products(client)) == {"Nasi Goreng", "Mie Goreng", "Es Teh"}


def test_login_page_is_served_at_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "name=\"csrf_token\"" in resp.text
    assert resp.headers["x-frame-options"] == "DENY"


def test_admin_login_redirects_to_admin(client):
    resp = _login(client, "admin@uas", "admin123", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin"
    assert client.get("/admin").status_code == 200


def test_user_login_redirects_to_user(client):
    resp = _login(client, "USER@uas", "user123", follow_redirects=False)
    assert resp.headers["location"] == "/user"


def test_failed_login_shows_error(client):
    resp = _login(client, "user@uas", "wrong")
    assert resp.status_code == 200
    assert "Login gagal: email atau password salah" in resp.text
    assert not client.cookies.get("session")


def test_post_without_csrf_token_is_rejected(client):
    resp = client.post("/login", data={"email": "user@uas", "password": "user123"})
    assert resp.status_code == 403


def test_protected_pages_redirect_to_login(client):
    for path in ("/user", "/user/history", "/admin", "/admin/products", "/admin/reports"):
        resp = client.get(path, follow_redirects=False)
        assert resp.status_code == 303, path
        assert resp.headers["location"] == "/login"


def test_regular_user_cannot_open_admin(client):
    _login(client, "user@uas", "user123")
    resp = client.get("/admin/users", follow_redirects=False)
    assert resp.headers["location"] == "/login"
    resp = _post(client, "/admin/products/delete", {"id": _products(client)["Es Teh"].id})
    assert resp.headers["location"] == "/login"
    assert "Es Teh" in _products(client)


def test_register_flow(client):
    token = _csrf(client)
    mismatch = client.post(
        "/register",
        data={"email": "ani@uas", "password": "rahasia1", "confirmPassword": "rahasia2", "csrf_token": token},
    )
    assert "Password dan konfirmasi password tidak cocok" in mismatch.text

    ok = client.post(
        "/register",
        data={"email": "ani@uas", "password": "rahasia1", "confirmPassword": "rahasia1", "csrf_token": token},
    )
    assert "Registrasi berhasil! Silakan login." in ok.text

    taken = client.post(
        "/register",
        data={"email": "ANI@uas", "password": "rahasia1", "confirmPassword": "rahasia1", "csrf_token": token},
    )
    assert "Email sudah terdaftar" in taken.text

    resp = _login(client, "ani@uas", "rahasia1", follow_redirects=False)
    assert resp.headers["location"] == "/user"


def test_dashboard_search_and_sort(client):
    _login(client, "user@uas", "user123")
    resp = client.get("/user", params={"search": "goreng", "sort": "price_asc"})
    assert resp.status_code == 200
    assert "Es Teh" not in resp.text
    assert resp.text.index("Mie Goreng") < resp.text.index("Nasi Goreng")
    assert "Rp 12.000" in resp.text


def test_checkout_then_history(client):
    _login(client, "user@uas", "user123")
    products = _products(client)
    nasi, teh = products["Nasi Goreng"], products["Es Teh"]

    resp = _post(client, "/user/checkout", {"productId": [nasi.id, teh.id], "qty": ["2", "0"]})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/user/history"

    assert _products(client)["Nasi Goreng"].stock == nasi.stock - 2
    history = client.get("/user/history")
    assert "Nasi Goreng" in history.text
    assert "Rp 30.000" in history.text


def test_checkout_with_nothing_selected(client):
    _login(client, "user@uas", "user123")
    nasi = _products(client)["Nasi Goreng"]
    resp = _post(client, "/user/checkout", {"productId": [nasi.id], "qty": ["abc"]})
    assert resp.status_code == 200
    assert "Tidak ada item yang dipilih" in resp.text
    assert client.app.state.transaction_service.get_all() == []


def test_history_only_shows_own_transactions(client):
    _login(client, "user@uas", "user123")
    nasi = _products(client)["Nasi Goreng"]
    _post(client, "/user/checkout", {"productId": [nasi.id], "qty": ["1"]})
    _post(client, "/logout", {})

    _login(client, "admin@uas", "admin123")
    assert "Belum ada transaksi" in client.get("/user/history").text
    assert "user@uas" in client.get("/admin/transactions").text


def test_admin_product_crud(client):
    _login(client, "admin@uas", "admin123")

    resp = _post(client, "/admin/products/add", {"name": "Kopi", "price": "8000", "stock": "5"})
    assert resp.headers["location"] == "/admin/products?ok=product_added"
    kopi = _products(client)["Kopi"]

    _post(client, "/admin/products/update", {"id": kopi.id, "name": "Kopi Susu", "price": "10000", "stock": "4"})
    assert _products(client)["Kopi Susu"].price == 10000

    bad = _post(client, "/admin/products/add", {"name": "Teh", "price": "murah", "stock": "1"})
    assert "error=" in bad.headers["location"]

    _post(client, "/admin/products/delete", {"id": kopi.id})
    assert "Kopi Susu" not in _products(client)
    assert "Produk dihapus." in client.get("/admin/products?ok=product_deleted").text


def test_admin_user_management(client):
    _login(client, "admin@uas", "admin123")
    users = client.app.state.user_service

    _post(client, "/admin/users/add", {"email": "kasir@uas", "password": "kasir123", "role": "admin"})
    assert users.find_by_email("kasir@uas").is_admin

    dup = _post(client, "/admin/users/add", {"email": "kasir@uas", "password": "kasir123", "role": "USER"})
    assert "error=" in dup.headers["location"]

    _post(client, "/admin/users/update-role", {"email": "kasir@uas", "role": "user"})
    assert not users.find_by_email("kasir@uas").is_admin

    _post(client, "/admin/users/delete", {"email": "kasir@uas"})
    assert users.find_by_email("kasir@uas") is None
    assert "kasir@uas" not in client.get("/admin/users").text


def test_admin_reports_and_save(client):
    _login(client, "user@uas", "user123")
    teh = _products(client)["Es Teh"]
    _post(client, "/user/checkout", {"productId": [teh.id], "qty": ["3"]})
    _post(client, "/logout", {})

    _login(client, "admin@uas", "admin123")
    reports = client.get("/admin/reports")
    assert "Rp 15.000" in reports.text

    resp = _post(client, "/admin/save", {})
    assert resp.headers["location"] == "/admin?ok=saved"
    assert os.path.exists(client.app.state.settings.transactions_file)
    assert client.app.state.transaction_service.total_orders() == 1


def test_logout_ends_session(client):
    _login(client, "user@uas", "user123")
    resp = _post(client, "/logout", {})
    assert resp.headers["location"] == "/login"
    assert client.get("/user", follow_redirects=False).status_code == 303


def test_login_is_rate_limited(data_dir, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2")
    from storefront.core import config as core_config

    core_config.get_settings.cache_clear()
    with TestClient(create_app()) as c:
        codes = [_login(c, "user@uas", "wrong").status_code for _ in range(3)]
    assert codes == [200, 200, 429]


def test_login_survives_zero_session_ttl(data_dir, monkeypatch):
    monkeypatch.setenv("SESSION_TTL_SECONDS", "0")
    from storefront.core import config as core_config

    core_config.get_settings.cache_clear()
    with TestClient(create_app()) as c:
        _login(c, "user@uas", "user123")
        assert c.get("/user", follow_redirects=False).status_code == 200


def test_templates_and_static_files_ship_inside_the_package(client):
    from storefront import app as app_module

    package_dir = os.path.dirname(os.path.abspath(app_module.__file__))
    for path in (app_module.TEMPLATES, app_module.WEB):
        assert os.path.commonpath([package_dir, os.path.abspath(path)]) == package_dir
    resp = client.get("/static/app.css")
    assert resp.status_code == 200
    assert "text/css" in resp.headers["content-type"]
