from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine, keeping pool tuning for server databases only."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_size", 10)           # Máx. conexiones en el pool
        kwargs.setdefault("max_overflow", 20)        # Conexiones extra si el pool está lleno
        kwargs.setdefault("pool_timeout", 30)        # Espera máx. para obtener una conexión
        kwargs.setdefault("pool_recycle", 1800)      # Recicla conexiones cada 30 min
        kwargs.setdefault("pool_pre_ping", True)     # Testea conexión antes de usarla
    return create_engine(database_url, echo=settings.DATABASE_ECHO, **kwargs)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create every table registered on ``Base``."""
    import app.models  # noqa: F401  registra los modelos en Base.metadata

    Base.metadata.create_all(bind=bind or engine)
