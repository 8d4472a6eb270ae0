from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from config import ACCESS_TOKEN_COOKIE, ACCESS_TOKEN_EXPIRE_MINUTES, get_error_key, get_error_message
from models import get_db
from services import ProductService, get_product_service
from utils.security import get_page_user
from utils.templating import render_template
from .auth import authenticate, token_for

router = APIRouter()

# ✅ Tableau de bord
@router.get("/")
def home(
    request: Request,
    current_user: dict = Depends(get_page_user),
    products: ProductService = Depends(get_product_service),
):
    return render_template(request, "index.html", {
        "current_user": current_user,
        "total_products": len(products.list()),
        "inventory_value": products.total_inventory_value(),
        "low_stock_count": len(products.low_stock()),
        "low_stock_threshold": products.low_stock_threshold,
    })

@router.get("/login")
def login_form(request: Request, logout: Optional[str] = Query(None)):
    return render_template(request, "login.html", {"error": None, "logged_out": logout is not None})

@router.post("/login")
def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    user = authenticate(db, username, password)
    if not user:
        error = get_error_message(get_error_key("auth", "login", "invalid_credentials"))
        return render_template(request, "login.html", {"error": error, "logged_out": False},
                               status_code=status.HTTP_401_UNAUTHORIZED)

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(ACCESS_TOKEN_COOKIE, token_for(user), httponly=True, samesite="lax",
                        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60)
    return response

@router.get("/logout")
def logout():
    response = RedirectResponse(url="/login?logout", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response
