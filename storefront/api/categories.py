from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional
from storefront.api.deps import get_catalog
from storefront.core.auth import require_admin
from storefront.schemas import CategoryFields, CategoryRead
from storefront.services.catalog import CatalogStore
from storefront.services.images import read_upload

router = APIRouter()

def category_form(
    name: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
) -> CategoryFields:
    return CategoryFields(name=name, slug=slug, description=description)

@router.get('', response_model=List[CategoryRead])
def list_categories(store: CatalogStore = Depends(get_catalog)):
    return store.list_categories()

@router.get('/{category_id}', response_model=CategoryRead)
def get_category(category_id: int, store: CatalogStore = Depends(get_catalog)):
    return store.get_category(category_id)

@router.post('', response_model=CategoryRead, status_code=201, dependencies=[Depends(require_admin)])
def create_category(fields: CategoryFields = Depends(category_form), image: Optional[UploadFile] = File(None),
                    store: CatalogStore = Depends(get_catalog)):
    return store.create_category(fields, read_upload(image))

@router.put('/{category_id}', response_model=CategoryRead, dependencies=[Depends(require_admin)])
def update_category(category_id: int, fields: CategoryFields = Depends(category_form),
                    image: Optional[UploadFile] = File(None), store: CatalogStore = Depends(get_catalog)):
    return store.update_category(category_id, fields, read_upload(image))

@router.delete('/{category_id}', dependencies=[Depends(require_admin)])
def delete_category(category_id: int, store: CatalogStore = Depends(get_catalog)):
    store.delete_category(category_id)
    return {'message': 'Category deleted successfully'}
