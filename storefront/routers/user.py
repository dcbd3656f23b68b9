from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from storefront.core import csrf
from storefront.routers.common import (
    get_product_service,
    get_transaction_service,
    login_redirect,
    render,
    require_user,
    to_int,
)
from storefront.services.product_service import SORT_OPTIONS
from storefront.services.transaction_service import EmptyCheckoutError

router = APIRouter(prefix="/user", tags=["user"])


@router.get("", response_class=HTMLResponse)
def dashboard(request: Request, search: Optional[str] = None, sort: Optional[str] = None):
    try:
        user = require_user(request)
    except HTTPException:
        return login_redirect()
    products = get_product_service(request)
    listing = products.sort_products(products.search_products(search), sort)
    return render(
        request,
        "user/dashboard.html",
        {"user": user, "products": listing, "search": search or "", "sort": sort or "", "sort_options": SORT_OPTIONS},
    )


@router.post("/checkout")
def checkout(
    request: Request,
    product_ids: Optional[List[str]] = Form(None, alias="productId"),
    qtys: Optional[List[str]] = Form(None, alias="qty"),
    csrf_token: str = Form(""),
):
    try:
        user = require_user(request)
    except HTTPException:
        return login_redirect()
    csrf.validate_csrf(request, csrf_token)
    quantities = [to_int(q, 0) for q in (qtys or [])]
    try:
        get_transaction_service(request).checkout(user.id, product_ids or [], quantities)
    except EmptyCheckoutError as exc:
        return render(
            request,
            "user/dashboard.html",
            {
                "user": user,
                "products": get_product_service(request).get_all(),
                "search": "",
                "sort": "",
                "sort_options": SORT_OPTIONS,
                "error": str(exc),
            },
        )
    return RedirectResponse("/user/history", status_code=303)


@router.get("/history", response_class=HTMLResponse)
def history(request: Request):
    try:
        user = require_user(request)
    except HTTPException:
        return login_redirect()
    transactions = get_transaction_service(request).get_by_user_id(user.id)
    transactions.sort(key=lambda t: t.timestamp.isoformat() if t.timestamp else "", reverse=True)
    return render(request, "user/history.html", {"user": user, "transactions": transactions})
