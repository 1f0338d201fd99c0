from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker
from storefront.db.session import SessionLocal
from storefront.services.catalog import CatalogStore
from storefront.services.orders import OrderService, OrderStore

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_session_factory() -> sessionmaker:
    return SessionLocal

def get_catalog(db: Session = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)

def get_order_service(factory: sessionmaker = Depends(get_session_factory)) -> OrderService:
    return OrderService(OrderStore(factory))
