from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from pydantic import ValidationError

from schemas.categories import CategoryCreate
from services import CategoryService, get_category_service
from utils.security import get_page_user, require_page_admin
from utils.templating import render_template, redirect_with_message, form_errors

router = APIRouter(prefix="/categories")

def _form_page(request: Request, current_user: dict, name: str, title: str,
               category_id: Optional[int] = None, errors: Optional[dict] = None):
    return render_template(request, "categories/form.html", {
        "current_user": current_user,
        "name": name,
        "title": title,
        "category_id": category_id,
        "errors": errors or {},
    }, status_code=400 if errors else 200)

@router.get("")
def list_categories(
    request: Request,
    message: Optional[str] = Query(None),
    current_user: dict = Depends(get_page_user),
    categories: CategoryService = Depends(get_category_service),
):
    return render_template(request, "categories/list.html", {
        "current_user": current_user,
        "categories": categories.list(),
        "message": message,
    })

@router.get("/new")
def new_category_form(
    request: Request,
    current_user: dict = Depends(require_page_admin),
):
    return _form_page(request, current_user, "", "New category")

@router.post("/new")
def create_category(
    request: Request,
    name: str = Form(""),
    current_user: dict = Depends(require_page_admin),
    categories: CategoryService = Depends(get_category_service),
):
    try:
        data = CategoryCreate(name=name)
    except ValidationError as exc:
        return _form_page(request, current_user, name, "New category", errors=form_errors(exc))

    categories.create(data.name)
    return redirect_with_message("/categories", "Category created")

@router.get("/{id}/edit")
def edit_category_form(
    request: Request,
    id: int,
    current_user: dict = Depends(require_page_admin),
    categories: CategoryService = Depends(get_category_service),
):
    category = categories.get_by_id(id)
    return _form_page(request, current_user, category.name, "Edit category", category_id=id)

@router.post("/{id}/edit")
def update_category(
    request: Request,
    id: int,
    name: str = Form(""),
    current_user: dict = Depends(require_page_admin),
    categories: CategoryService = Depends(get_category_service),
):
    try:
        data = CategoryCreate(name=name)
    except ValidationError as exc:
        return _form_page(request, current_user, name, "Edit category", category_id=id, errors=form_errors(exc))

    categories.update(id, data.name)
    return redirect_with_message("/categories", "Category updated")

@router.post("/{id}/delete")
def delete_category(
    id: int,
    current_user: dict = Depends(require_page_admin),
    categories: CategoryService = Depends(get_category_service),
):
    categories.delete(id)
    return redirect_with_message("/categories", "Category deleted")
