from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from jobly.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Yield a database session and close it afterwards.

    Every data-access function takes this session as its first argument;
    the caller owns its lifetime.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """
    Create all tables.

    Args:
        bind: Engine to create the schema on (defaults to the configured engine)
    """
    from jobly.models import company, job, user  # noqa: F401 - register models
    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    from jobly.core.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info(f"Creating database schema for {settings.PROJECT_NAME}...")
    init_db()
    logger.info("Database schema created successfully")
