from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from storefront.core import csrf
from storefront.domain.models import ROLES
from storefront.routers.common import (
    get_product_service,
    get_session_service,
    get_transaction_service,
    get_user_service,
    login_redirect,
    render,
    require_admin,
    to_int,
)
from storefront.services.product_service import ProductValidationError
from storefront.services.user_service import UserError

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)

OK_MESSAGES = {
    "product_added": "Produk ditambahkan.",
    "product_updated": "Produk diperbarui.",
    "product_deleted": "Produk dihapus.",
    "user_added": "User ditambahkan.",
    "role_updated": "Role diperbarui.",
    "user_deleted": "User dihapus.",
    "saved": "Data disimpan.",
}


def _redirect(path: str, *, ok: str = "", error: str = "") -> RedirectResponse:
    if ok:
        path = f"{path}?ok={quote(ok)}"
    elif error:
        path = f"{path}?error={quote(error)}"
    return RedirectResponse(path, status_code=303)


def _flash(request: Request) -> dict:
    ok = (request.query_params.get("ok") or "").strip()
    return {"message": OK_MESSAGES.get(ok, ""), "error": (request.query_params.get("error") or "").strip()}


def _guard_post(request: Request, csrf_token: str) -> Optional[RedirectResponse]:
    try:
        require_admin(request)
    except HTTPException:
        return login_redirect()
    csrf.validate_csrf(request, csrf_token)
    return None


def _emails_by_id(request: Request) -> dict[str, str]:
    return {u.id: u.email for u in get_user_service(request).get_all()}


# ---------------------- dashboard ----------------------
@router.get("", response_class=HTMLResponse)
def dashboard(request: Request):
    try:
        admin = require_admin(request)
    except HTTPException:
        return login_redirect()
    transactions = get_transaction_service(request)
    all_transactions = transactions.get_all()
    recent = sorted(all_transactions, key=lambda t: t.timestamp.isoformat() if t.timestamp else "", reverse=True)[:5]
    return render(
        request,
        "admin/dashboard.html",
        {
            "user": admin,
            "products": get_product_service(request).get_all(),
            "transactions": all_transactions,
            "recent_transactions": recent,
            "users": get_user_service(request).get_all(),
            "emails": _emails_by_id(request),
            "total_revenue": sum(t.total for t in all_transactions),
            **_flash(request),
        },
    )


@router.post("/save")
def save_data(request: Request, csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    users = get_user_service(request)
    products = get_product_service(request)
    transactions = get_transaction_service(request)
    users.save_all(users.get_all())
    products.save_all(products.get_all())
    transactions.save_all(transactions.get_all())
    get_session_service(request).save_all()
    logger.info("Data files rewritten on admin request")
    return _redirect("/admin", ok="saved")


# ---------------------- products ----------------------
@router.get("/products", response_class=HTMLResponse)
def products(request: Request):
    try:
        admin = require_admin(request)
    except HTTPException:
        return login_redirect()
    return render(
        request,
        "admin/products.html",
        {"user": admin, "products": get_product_service(request).get_all(), **_flash(request)},
    )


def _product_numbers(price: str, stock: str) -> tuple[Optional[int], Optional[int]]:
    return to_int(price), to_int(stock)


@router.post("/products/add")
def add_product(request: Request, name: str = Form(""), price: str = Form(""), stock: str = Form(""), csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    price_value, stock_value = _product_numbers(price, stock)
    if price_value is None or stock_value is None:
        return _redirect("/admin/products", error="Harga dan stok harus berupa angka")
    try:
        get_product_service(request).create_product(name, price_value, stock_value)
    except ProductValidationError as exc:
        return _redirect("/admin/products", error=exc.message)
    return _redirect("/admin/products", ok="product_added")


@router.post("/products/update")
def update_product(
    request: Request,
    id: str = Form(...),
    name: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    csrf_token: str = Form(""),
):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    price_value, stock_value = _product_numbers(price, stock)
    if price_value is None or stock_value is None:
        return _redirect("/admin/products", error="Harga dan stok harus berupa angka")
    try:
        updated = get_product_service(request).update_product(id, name, price_value, stock_value)
    except ProductValidationError as exc:
        return _redirect("/admin/products", error=exc.message)
    if updated is None:
        return _redirect("/admin/products", error="Produk tidak ditemukan")
    return _redirect("/admin/products", ok="product_updated")


@router.post("/products/delete")
def delete_product(request: Request, id: str = Form(...), csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    get_product_service(request).delete_product(id)
    return _redirect("/admin/products", ok="product_deleted")


# ---------------------- transactions & reports ----------------------
@router.get("/transactions", response_class=HTMLResponse)
def transactions(request: Request):
    try:
        admin = require_admin(request)
    except HTTPException:
        return login_redirect()
    return render(
        request,
        "admin/transactions.html",
        {
            "user": admin,
            "transactions": get_transaction_service(request).get_all(),
            "emails": _emails_by_id(request),
        },
    )


@router.get("/reports", response_class=HTMLResponse)
def reports(request: Request):
    try:
        admin = require_admin(request)
    except HTTPException:
        return login_redirect()
    svc = get_transaction_service(request)
    return render(
        request,
        "admin/reports.html",
        {
            "user": admin,
            "total_revenue": svc.total_revenue(),
            "total_orders": svc.total_orders(),
            "average_order": svc.average_order(),
            "highest_order": svc.highest_order(),
        },
    )


# ---------------------- users ----------------------
@router.get("/users", response_class=HTMLResponse)
def users(request: Request):
    try:
        admin = require_admin(request)
    except HTTPException:
        return login_redirect()
    return render(
        request,
        "admin/users.html",
        {
            "user": admin,
            "users": get_user_service(request).get_all(),
            "spending": get_transaction_service(request).spending_by_user(),
            "roles": ROLES,
            **_flash(request),
        },
    )


@router.post("/users/add")
def add_user(request: Request, email: str = Form(""), password: str = Form(""), role: str = Form(""), csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    try:
        get_user_service(request).create_user(email, password, role)
    except UserError as exc:
        return _redirect("/admin/users", error=exc.message)
    return _redirect("/admin/users", ok="user_added")


@router.post("/users/update-role")
def update_user_role(request: Request, email: str = Form(""), role: str = Form(""), csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    try:
        updated = get_user_service(request).update_role(email, role)
    except UserError as exc:
        return _redirect("/admin/users", error=exc.message)
    if updated is None:
        return _redirect("/admin/users", error="User tidak ditemukan")
    return _redirect("/admin/users", ok="role_updated")


@router.post("/users/delete")
def delete_user(request: Request, email: str = Form(""), csrf_token: str = Form("")):
    denied = _guard_post(request, csrf_token)
    if denied:
        return denied
    if not get_user_service(request).delete_by_email(email):
        return _redirect("/admin/users", error="User tidak ditemukan")
    return _redirect("/admin/users", ok="user_deleted")
