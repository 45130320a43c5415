from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from invoice_analytics.core.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    # TestClient runs requests on a worker thread
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
