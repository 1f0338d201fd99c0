"""Catalog store: categories and products.

Product rows carry a denormalized ``category`` label next to the optional
``category_id`` foreign key. The label is what the storefront shows, so it is
kept even when the id cannot be resolved, and it is not rewritten when a
category is renamed later.
"""
import enum
import logging
import re
from typing import List, NamedTuple, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import (
    DuplicateKey, HasDependents, MissingCategory, MissingImage, NotFound, ValidationError,
)
from storefront.db.models import Category, Product
from storefront.schemas import CategoryFields, CategoryRead, ProductFields, ProductRead

log = logging.getLogger(__name__)

SLUG_RE = re.compile(r'^[a-z0-9-]+$')

def slugify(name: str) -> str:
    slug = re.sub(r'\s+', '-', name.strip().lower())
    return re.sub(r'[^a-z0-9-]', '', slug)


class Resolution(str, enum.Enum):
    BY_ID = 'by_id'
    BY_LOOKUP = 'by_lookup'
    LABEL_ONLY = 'label_only'
    UNRESOLVED = 'unresolved'


class CategoryResolution(NamedTuple):
    source: Resolution
    category_id: Optional[int]
    name: Optional[str]


def resolve_category(db: Session, category_id: Optional[int] = None, category: Optional[str] = None) -> CategoryResolution:
    """Pick the category a product should point at.

    An explicit id wins; otherwise ``category`` is matched against slugs and
    names. Whatever cannot be matched falls back to the supplied label, and
    with no label at all the result is UNRESOLVED.
    """
    label = category.strip() if category and category.strip() else None
    if category_id:
        found = db.get(Category, category_id)
        if found:
            return CategoryResolution(Resolution.BY_ID, found.id, found.name)
    elif label:
        found = db.execute(
            select(Category).where(or_(Category.slug == label, Category.name == label)).limit(1)
        ).scalar_one_or_none()
        if found:
            return CategoryResolution(Resolution.BY_LOOKUP, found.id, found.name)
    if label:
        return CategoryResolution(Resolution.LABEL_ONLY, None, label)
    return CategoryResolution(Resolution.UNRESOLVED, None, None)


def _product_read(p: Product, category_name: Optional[str], category_slug: Optional[str]) -> ProductRead:
    return ProductRead(
        id=p.id,
        name=p.name,
        price=p.price,
        image=p.image,
        category=p.category,
        category_id=p.category_id,
        category_name=category_name,
        category_slug=category_slug,
        rating=p.rating or 0,
        reviews=p.reviews or 0,
        in_stock=bool(p.in_stock),
        featured=bool(p.featured),
        description=p.description,
        created_at=p.created_at,
    )


def _check_product_numbers(fields: ProductFields):
    if fields.price is not None and fields.price < 0:
        raise ValidationError('Price must be a non-negative number')
    if fields.rating is not None and not 0 <= fields.rating <= 5:
        raise ValidationError('Rating must be between 0 and 5')
    if fields.reviews is not None and fields.reviews < 0:
        raise ValidationError('Reviews must be a non-negative integer')


class CatalogStore:
    def __init__(self, db: Session):
        self.db = db

    # --- categories ---

    def list_categories(self) -> List[CategoryRead]:
        rows = self.db.execute(select(Category).order_by(Category.name.asc())).scalars().all()
        return [CategoryRead.model_validate(c) for c in rows]

    def _category(self, category_id: int) -> Category:
        obj = self.db.get(Category, category_id)
        if not obj:
            raise NotFound('Category not found')
        return obj

    def get_category(self, category_id: int) -> CategoryRead:
        return CategoryRead.model_validate(self._category(category_id))

    def _ensure_unique(self, name: str, slug: str, exclude_id: Optional[int] = None):
        stmt = select(Category.id).where(or_(Category.name == name, Category.slug == slug))
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if self.db.execute(stmt.limit(1)).first():
            raise DuplicateKey('Category name or slug already exists')

    def _commit_category(self, obj: Category) -> CategoryRead:
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race against a concurrent writer
            self.db.rollback()
            raise DuplicateKey('Category name or slug already exists')
        self.db.refresh(obj)
        return CategoryRead.model_validate(obj)

    def create_category(self, fields: CategoryFields, image: Optional[bytes] = None) -> CategoryRead:
        name = (fields.name or '').strip()
        if not name:
            raise ValidationError('Category name is required')
        if fields.slug:
            slug = fields.slug.strip()
            if not SLUG_RE.match(slug):
                raise ValidationError('Slug may only contain lowercase letters, digits and hyphens')
        else:
            slug = slugify(name)
            if not slug:
                raise ValidationError('Could not generate a valid slug from category name')
        self._ensure_unique(name, slug)
        obj = Category(name=name, slug=slug, description=fields.description or None, image=image)
        self.db.add(obj)
        out = self._commit_category(obj)
        log.info("created category %s (%s)", out.id, out.slug)
        return out

    def update_category(self, category_id: int, fields: CategoryFields, image: Optional[bytes] = None) -> CategoryRead:
        obj = self._category(category_id)
        name = obj.name if fields.name is None else fields.name.strip()
        slug = obj.slug if fields.slug is None else fields.slug.strip()
        if not name:
            raise ValidationError('Category name is required')
        if not SLUG_RE.match(slug):
            raise ValidationError('Slug may only contain lowercase letters, digits and hyphens')
        self._ensure_unique(name, slug, exclude_id=obj.id)
        obj.name, obj.slug = name, slug
        if fields.description is not None:
            obj.description = fields.description or None
        if image:
            obj.image = image
        out = self._commit_category(obj)
        log.info("updated category %s", out.id)
        return out

    def delete_category(self, category_id: int):
        obj = self._category(category_id)
        count = self.db.execute(
            select(func.count(Product.id)).where(Product.category_id == obj.id)
        ).scalar_one()
        if count > 0:
            raise HasDependents('Cannot delete category with existing products. Please reassign products first.')
        self.db.delete(obj)
        self.db.commit()
        log.info("deleted category %s", category_id)

    # --- products ---

    def _joined(self):
        return select(Product, Category.name, Category.slug).outerjoin(Category, Product.category_id == Category.id)

    def list_products(self, featured: Optional[bool] = None, category_id: Optional[int] = None,
                      category_slug: Optional[str] = None) -> List[ProductRead]:
        stmt = self._joined()
        if featured:
            stmt = stmt.where(Product.featured.is_(True))
        if category_id:
            stmt = stmt.where(Product.category_id == category_id)
        elif category_slug:
            stmt = stmt.where(Category.slug == category_slug)
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())
        return [_product_read(*row) for row in self.db.execute(stmt).all()]

    def get_product(self, product_id: int) -> ProductRead:
        row = self.db.execute(self._joined().where(Product.id == product_id)).first()
        if not row:
            raise NotFound('Product not found')
        return _product_read(*row)

    def create_product(self, fields: ProductFields, image: Optional[bytes]) -> ProductRead:
        if not (fields.name or '').strip() or fields.price is None:
            raise ValidationError('Missing required fields: name and price are required')
        _check_product_numbers(fields)
        if not image:
            raise MissingImage()
        res = resolve_category(self.db, fields.category_id, fields.category)
        if res.name is None:
            raise MissingCategory()
        obj = Product(
            name=fields.name.strip(),
            price=fields.price,
            image=image,
            category=res.name,
            category_id=res.category_id,
            rating=fields.rating or 0,
            reviews=fields.reviews or 0,
            in_stock=True if fields.in_stock is None else fields.in_stock,
            featured=bool(fields.featured),
            description=fields.description or None,
        )
        self.db.add(obj)
        self.db.commit()
        log.info("created product %s in %r (%s)", obj.id, res.name, res.source.value)
        return self.get_product(obj.id)

    def update_product(self, product_id: int, fields: ProductFields, image: Optional[bytes] = None) -> ProductRead:
        obj = self.db.get(Product, product_id)
        if not obj:
            raise NotFound('Product not found')
        _check_product_numbers(fields)
        if fields.name is not None:
            if not fields.name.strip():
                raise ValidationError('Product name cannot be blank')
            obj.name = fields.name.strip()
        if fields.category_id is not None or fields.category is not None:
            res = resolve_category(self.db, fields.category_id, fields.category)
            if res.name is None:
                raise MissingCategory()
            obj.category, obj.category_id = res.name, res.category_id
        for attr in ('price', 'rating', 'reviews', 'in_stock', 'featured'):
            value = getattr(fields, attr)
            if value is not None:
                setattr(obj, attr, value)
        if fields.description is not None:
            obj.description = fields.description or None
        if image:
            obj.image = image
        self.db.commit()
        log.info("updated product %s", product_id)
        return self.get_product(product_id)

    def delete_product(self, product_id: int):
        obj = self.db.get(Product, product_id)
        if not obj:
            raise NotFound('Product not found')
        self.db.delete(obj)
        self.db.commit()
        log.info("deleted product %s", product_id)
