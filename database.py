"""
ResumeTier Database Models
SQLAlchemy ORM for storing scoring runs
"""

from sqlalchemy import create_engine, Column, String, Float, Integer, Text, DateTime, JSON, Boolean
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from datetime import datetime
from typing import Any, Dict, Optional
import logging
import os
import uuid

from resume_models import ScoringResult

logger = logging.getLogger(__name__)

Base = declarative_base()


class Analysis(Base):
    """
    Stores one scoring run with its full report
    """
    __tablename__ = 'analyses'

    # Primary identifiers
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)

    # Resume info
    candidate_name = Column(String(255), nullable=False)
    filename = Column(String(255))
    resume_text = Column(Text)  # kept for re-scoring

    # Scores
    status = Column(String(32), nullable=False, default="ok")
    overall_score = Column(Float, nullable=False, index=True)
    match_band = Column(String(50), nullable=False, index=True)
    confidence = Column(String(20))
    input_quality = Column(String(20))
    candidate_level = Column(String(20))
    auto_reject_risk = Column(Boolean, default=False)
    has_job_description = Column(Boolean, default=False)
    word_count = Column(Integer)

    # Report parts stored as JSON
    tier_scores = Column(JSON)
    critical_metrics = Column(JSON)
    red_flags = Column(JSON)
    missing_keywords = Column(JSON)
    report = Column(JSON)

    # Metadata
    analyzed_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Analysis(id={self.id}, candidate={self.candidate_name}, score={self.overall_score})>"

    def to_dict(self, include_report: bool = True) -> Dict[str, Any]:
        """Convert to dictionary for JSON response"""
        out = {
            "id": self.id,
            "user_id": self.user_id,
            "candidate_name": self.candidate_name,
            "filename": self.filename,
            "status": self.status,
            "overall_score": self.overall_score,
            "match_band": self.match_band,
            "confidence": self.confidence,
            "input_quality": self.input_quality,
            "candidate_level": self.candidate_level,
            "auto_reject_risk": bool(self.auto_reject_risk),
            "has_job_description": bool(self.has_job_description),
            "word_count": self.word_count,
            "tier_scores": self.tier_scores or {},
            "critical_metrics": self.critical_metrics or {},
            "red_flags": self.red_flags or [],
            "missing_keywords": self.missing_keywords or [],
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }
        if include_report:
            out["report"] = self.report or {}
        return out


# Database connection setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./resumetier.db")

# Hosted PostgreSQL URLs may use the legacy postgres:// scheme
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# SQLite connections are shared with FastAPI's threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Initialize database - create all tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized (%s)", engine.url.get_backend_name())


def get_db():
    """Dependency for getting DB session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def save_analysis(
    db: Session,
    result: ScoringResult,
    resume_text: str,
    filename: Optional[str],
    user_id: str,
    candidate_name: Optional[str] = None,
    has_job_description: bool = False,
) -> Analysis:
    """Save a scoring run to the database"""
    score = result.score
    quality = result.quality or {}

    analysis = Analysis(
        user_id=user_id,
        candidate_name=candidate_name or filename or "Unknown",
        filename=filename,
        resume_text=resume_text,
        status=result.status,
        overall_score=score.get("overall", 0),
        match_band=score.get("match_band", ""),
        confidence=score.get("confidence"),
        input_quality=quality.get("quality"),
        candidate_level=score.get("candidate_level"),
        auto_reject_risk=bool(score.get("auto_reject_risk")),
        has_job_description=has_job_description,
        word_count=len(resume_text.split()),
        tier_scores=score.get("tier_scores"),
        critical_metrics=score.get("critical_metrics"),
        red_flags=score.get("red_flags"),
        missing_keywords=score.get("missing_keywords"),
        report=result.to_dict(),
    )

    db.add(analysis)
    db.commit()
    db.refresh(analysis)

    return analysis


# Run on import (for development)
if __name__ == "__main__":
    init_db()
