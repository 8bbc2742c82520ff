"""Append-only storage of match records."""

from pathlib import Path
from typing import List, Optional

from .database import MatchScore, get_session, init_database
from .logger import get_logger
from .records import MatchRecord

logger = get_logger()


class MatchStore:
    """
    Persists MatchRecords to SQLite.

    Saving the same résumé/job pair twice adds a second row; there is no
    update or delete path.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        init_database(self.db_path)

    def save(self, record: MatchRecord) -> int:
        """Insert the record and return its row id."""
        session = get_session(self.db_path)
        try:
            row = MatchScore(
                resume_id=record.resume_ref,
                job_id=record.job_ref,
                match_score=record.match_score,
                recommendations=list(record.recommendations),
            )
            session.add(row)
            session.commit()
            row_id = row.id
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.record_saved()
        logger.info("Saved match record", id=row_id, resume_id=record.resume_ref, job_id=record.job_ref)
        return row_id

    def history(self, resume_ref: Optional[str] = None, job_ref: Optional[str] = None) -> List[MatchRecord]:
        """Return stored records, oldest first, optionally filtered by résumé and/or job."""
        session = get_session(self.db_path)
        try:
            query = session.query(MatchScore)
            if resume_ref is not None:
                query = query.filter_by(resume_id=resume_ref)
            if job_ref is not None:
                query = query.filter_by(job_id=job_ref)
            rows = query.order_by(MatchScore.created_at, MatchScore.id).all()
            return [
                MatchRecord(
                    resume_ref=row.resume_id,
                    job_ref=row.job_id,
                    match_score=row.match_score,
                    recommendations=tuple(row.recommendations or ()),
                )
                for row in rows
            ]
        finally:
            session.close()
