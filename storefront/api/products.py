from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional
from storefront.api.deps import get_catalog
from storefront.core.auth import require_admin
from storefront.schemas import ProductFields, ProductRead
from storefront.services.catalog import CatalogStore
from storefront.services.images import read_upload

router = APIRouter()

def product_form(
    name: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    category: Optional[str] = Form(None),
    category_id: Optional[int] = Form(None, alias='categoryId'),
    rating: Optional[float] = Form(None),
    reviews: Optional[int] = Form(None),
    in_stock: Optional[bool] = Form(None, alias='inStock'),
    featured: Optional[bool] = Form(None),
    description: Optional[str] = Form(None),
) -> ProductFields:
    return ProductFields(
        name=name, price=price, category=category, category_id=category_id, rating=rating,
        reviews=reviews, in_stock=in_stock, featured=featured, description=description,
    )

@router.get('', response_model=List[ProductRead])
def list_products(featured: Optional[bool] = None, category: Optional[str] = None,
                  categoryId: Optional[int] = None, store: CatalogStore = Depends(get_catalog)):
    return store.list_products(featured=featured, category_id=categoryId, category_slug=category)

@router.get('/{product_id}', response_model=ProductRead)
def get_product(product_id: int, store: CatalogStore = Depends(get_catalog)):
    return store.get_product(product_id)

@router.post('', response_model=ProductRead, status_code=201, dependencies=[Depends(require_admin)])
def create_product(fields: ProductFields = Depends(product_form), image: Optional[UploadFile] = File(None),
                   store: CatalogStore = Depends(get_catalog)):
    return store.create_product(fields, read_upload(image))

@router.put('/{product_id}', response_model=ProductRead, dependencies=[Depends(require_admin)])
def update_product(product_id: int, fields: ProductFields = Depends(product_form),
                   image: Optional[UploadFile] = File(None), store: CatalogStore = Depends(get_catalog)):
    return store.update_product(product_id, fields, read_upload(image))

@router.delete('/{product_id}', dependencies=[Depends(require_admin)])
def delete_product(product_id: int, store: CatalogStore = Depends(get_catalog)):
    store.delete_product(product_id)
    return {'message': 'Product deleted successfully'}
