from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from docanalytics.config import DATABASE_URL

_IS_SQLITE = DATABASE_URL.startswith("sqlite")

# SQLite connections are shared across FastAPI's threadpool
_connect_args = {"check_same_thread": False} if _IS_SQLITE else {}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)


def _unicode_lower(value):
    return value.lower() if value is not None else None


if _IS_SQLITE:
    @event.listens_for(engine, "connect")
    def _register_sqlite_functions(dbapi_conn, connection_record):
        # built-in lower() only folds ASCII; content search relies on full case folding
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
