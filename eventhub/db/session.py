from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from eventhub.core.config import settings

# The engine is the entry point to the database. It's configured with the
# database URL and handles the connection pooling.
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# SessionLocal is a factory for creating new Session objects.
# One session is opened per request and per scheduled job run.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always closed, even if the endpoint raised.
        db.close()
