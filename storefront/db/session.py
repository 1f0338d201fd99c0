from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool
from storefront.core.config import settings

class Base(DeclarativeBase): pass

def make_engine(dsn: str):
    # SQLite keeps one shared connection so in-memory databases survive across sessions
    if dsn.startswith('sqlite'):
        return create_engine(dsn, connect_args={'check_same_thread': False}, poolclass=StaticPool)
    return create_engine(
        dsn,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )

def make_sessionmaker(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

engine = make_engine(settings.POSTGRES_DSN)
SessionLocal = make_sessionmaker(engine)
