from fastapi import APIRouter, Depends, Response, status

from schemas.categories import *
from services import CategoryService, get_category_service
from utils.security import get_current_user, require_admin

router = APIRouter(prefix="/categories")

@router.get("", response_model=list[CategoryResponse])
def list_categories(
    current_user: dict = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return service.list()

@router.get("/{id}", response_model=CategoryResponse)
def get_category(
    id: int,
    current_user: dict = Depends(get_current_user),
    service: CategoryService = Depends(get_category_service),
):
    return service.get_by_id(id)

# ✅ Endpoint pour ajouter une catégorie
@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    current_user: dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return service.create(category.name)

@router.put("/{id}", response_model=CategoryResponse)
def update_category(
    id: int,
    category: CategoryCreate,
    current_user: dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return service.update(id, category.name)

@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    id: int,
    current_user: dict = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    service.delete(id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
