from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings


def register_sqlite_functions(sqlite_engine) -> None:
    # SQLite's builtin lower() only folds ASCII; ilike relies on it
    @event.listens_for(sqlite_engine, "connect")
    def _unicode_lower(dbapi_conn, connection_record):
        dbapi_conn.create_function(
            "lower", 1, lambda value: value.lower() if value is not None else None
        )


connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
if engine.dialect.name == "sqlite":
    register_sqlite_functions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    import models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)
