from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from pydantic import ValidationError

from schemas.products import ProductCreate, StockUpdate, PriceUpdate
from services import CategoryService, ProductService, get_category_service, get_product_service
from utils.security import get_page_user, require_page_admin
from utils.templating import render_template, redirect_with_message, form_errors

router = APIRouter(prefix="/products")

def _form_page(request: Request, current_user: dict, categories: CategoryService, form: dict,
               title: str, product_id: Optional[int] = None, errors: Optional[dict] = None):
    return render_template(request, "products/form.html", {
        "current_user": current_user,
        "form": form,
        "errors": errors or {},
        "title": title,
        "product_id": product_id,
        "categories": categories.list(),
    }, status_code=400 if errors else 200)

def _raw_form(name, description, price, stock, category_ids) -> dict:
    return {"name": name, "description": description, "price": price, "stock": stock,
            "category_ids": category_ids}

def _validate(form: dict) -> ProductCreate:
    return ProductCreate(
        name=form["name"],
        description=form["description"],
        price=form["price"] or None,
        stock=form["stock"] or None,
        category_ids=form["category_ids"],
    )

@router.get("")
def list_products(
    request: Request,
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    message: Optional[str] = Query(None),
    current_user: dict = Depends(get_page_user),
    products: ProductService = Depends(get_product_service),
    categories: CategoryService = Depends(get_category_service),
):
    if search and search.strip():
        items = products.search_by_name(search.strip())
    elif category and category.strip():
        items = products.search_by_category(category.strip())
    else:
        items = products.list()

    return render_template(request, "products/list.html", {
        "current_user": current_user,
        "products": items,
        "search": search,
        "category": category,
        "categories": categories.list(),
        "total_value": products.total_inventory_value(),
        "message": message,
    })

@router.get("/new")
def new_product_form(
    request: Request,
    current_user: dict = Depends(require_page_admin),
    categories: CategoryService = Depends(get_category_service),
):
    form = _raw_form("", "", "", "", [])
    return _form_page(request, current_user, categories, form, "New product")

@router.post("/new")
def create_product(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    category_ids: List[int] = Form([]),
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
    categories: CategoryService = Depends(get_category_service),
):
    form = _raw_form(name, description, price, stock, category_ids)
    try:
        data = _validate(form)
    except ValidationError as exc:
        return _form_page(request, current_user, categories, form, "New product", errors=form_errors(exc))

    products.create(data.name, data.description, data.price, data.stock, data.category_ids)
    return redirect_with_message("/products", "Product created")

# Déclarée avant /{id} pour ne pas être capturée par la route paramétrée
@router.get("/low-stock")
def low_stock(
    request: Request,
    threshold: Optional[int] = Query(None),
    current_user: dict = Depends(get_page_user),
    products: ProductService = Depends(get_product_service),
):
    if threshold is None:
        threshold = products.low_stock_threshold
    return render_template(request, "products/low_stock.html", {
        "current_user": current_user,
        "products": products.low_stock(threshold),
        "threshold": threshold,
    })

@router.get("/{id}")
def product_detail(
    request: Request,
    id: int,
    current_user: dict = Depends(get_page_user),
    products: ProductService = Depends(get_product_service),
):
    return render_template(request, "products/detail.html", {
        "current_user": current_user,
        "product": products.get_by_id(id),
    })

@router.get("/{id}/edit")
def edit_product_form(
    request: Request,
    id: int,
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
    categories: CategoryService = Depends(get_category_service),
):
    product = products.get_by_id(id)
    all_categories = categories.list()
    selected = [c.id for c in all_categories if c.name in product.categories]
    form = _raw_form(product.name, product.description or "", str(product.price), str(product.stock), selected)
    return _form_page(request, current_user, categories, form, "Edit product", product_id=id)

@router.post("/{id}/edit")
def update_product(
    request: Request,
    id: int,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    stock: str = Form(""),
    category_ids: List[int] = Form([]),
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
    categories: CategoryService = Depends(get_category_service),
):
    form = _raw_form(name, description, price, stock, category_ids)
    try:
        data = _validate(form)
    except ValidationError as exc:
        return _form_page(request, current_user, categories, form, "Edit product", product_id=id,
                          errors=form_errors(exc))

    products.update(id, data.name, data.description, data.price, data.stock, data.category_ids)
    return redirect_with_message("/products", "Product updated")

@router.get("/{id}/stock")
def stock_form(
    request: Request,
    id: int,
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
):
    return render_template(request, "products/stock.html", {
        "current_user": current_user,
        "product": products.get_by_id(id),
        "errors": {},
    })

@router.post("/{id}/stock")
def update_stock(
    request: Request,
    id: int,
    stock: str = Form(""),
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
):
    try:
        data = StockUpdate(stock=stock or None)
    except ValidationError as exc:
        return render_template(request, "products/stock.html", {
            "current_user": current_user,
            "product": products.get_by_id(id),
            "errors": form_errors(exc),
        }, status_code=400)

    products.update_stock(id, data.stock)
    return redirect_with_message("/products", "Stock updated")

@router.get("/{id}/price")
def price_form(
    request: Request,
    id: int,
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
):
    return render_template(request, "products/price.html", {
        "current_user": current_user,
        "product": products.get_by_id(id),
        "errors": {},
    })

@router.post("/{id}/price")
def update_price(
    request: Request,
    id: int,
    price: str = Form(""),
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
):
    try:
        data = PriceUpdate(price=price or None)
    except ValidationError as exc:
        return render_template(request, "products/price.html", {
            "current_user": current_user,
            "product": products.get_by_id(id),
            "errors": form_errors(exc),
        }, status_code=400)

    products.update_price(id, data.price)
    return redirect_with_message("/products", "Price updated")

@router.post("/{id}/delete")
def delete_product(
    id: int,
    current_user: dict = Depends(require_page_admin),
    products: ProductService = Depends(get_product_service),
):
    products.delete(id)
    return redirect_with_message("/products", "Product deleted")
