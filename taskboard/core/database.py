from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from taskboard.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Dépendance sessionDB"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
