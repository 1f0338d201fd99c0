"""Idempotent seed data: the default categories and the admin account."""
import logging
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from storefront.db.models import Category, User
from storefront.security.utils import hash_password

log = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ('Audio', 'audio', 'Audio equipment and accessories'),
    ('Wearables', 'wearables', 'Wearable technology and smart devices'),
    ('Accessories', 'accessories', 'Tech accessories and peripherals'),
    ('Cameras', 'cameras', 'Camera equipment and accessories'),
    ('Displays', 'displays', 'Monitors and display screens'),
]

def seed_categories(db: Session) -> int:
    added = 0
    for name, slug, description in DEFAULT_CATEGORIES:
        exists = db.execute(
            select(Category.id).where(or_(Category.name == name, Category.slug == slug))
        ).first()
        if exists:
            continue
        db.add(Category(name=name, slug=slug, description=description))
        added += 1
    db.commit()
    log.info("seeded %d categories", added)
    return added

def seed_admin(db: Session, username: str, email: str, password: str) -> bool:
    if db.query(User).filter(User.username == username).first():
        log.info("admin user %s already exists", username)
        return False
    db.add(User(username=username, email=email, password_hash=hash_password(password), role='admin'))
    db.commit()
    log.info("created admin user %s", username)
    return True
