"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for match score storage.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class MatchScore(Base):
    """One scoring outcome. Rows are only ever inserted."""

    __tablename__ = "match_scores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    resume_id = Column(String, nullable=False, index=True)
    job_id = Column(String, nullable=False, index=True)
    match_score = Column(Integer, nullable=False)
    recommendations = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
