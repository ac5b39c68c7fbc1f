from fastapi import FastAPI, UploadFile, File, Form, Header, HTTPException, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Any, Dict, Optional, List, Tuple
import tempfile
import logging
import os
import io
import csv
import time
from pathlib import Path
from datetime import datetime

# Text extraction
import docx2txt
from pdfminer.high_level import extract_text as pdf_extract_text

# Our modules
from resume_models import ExtractionMode, ResumeDataError, ScoringInput, parse_resume_data
from enhanced_scoring_service import EnhancedScoringService
from evidence_locked_scorer import generate_evidence_report, score_with_evidence
from role_classifier import classify_role, get_optimization_strategy
from hybrid_matcher import generate_match_report, identify_skill_gaps, match_jd_to_resume
from formatting_analyzer import (
    DocumentLayout, analyze_formatting, generate_summary, improvement_priority, validate_assessment
)
from bullet_length_fixer import apply_fixes, generate_fix_report, scan_bullets, violation_summary
from scoring_tables import RUBRIC_VERSION, TABLES_VERSION
from database import Analysis, get_db, init_db, save_analysis

# Configuration
API_KEY = os.getenv("RT_API_KEY", "changeme123!!")
DEFAULT_USER_ID = os.getenv("RT_DEFAULT_USER_ID", "00000000-0000-4000-8000-000000000001")
MAX_BULK_FILES = int(os.getenv("RT_MAX_BULK", "50"))
LOG_LEVEL = os.getenv("RT_LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("RT_CORS_ORIGINS", "*").split(",") if o.strip()]

SERVICE_NAME = "ResumeTier - Multi-Tier Resume Scoring"
SERVICE_VERSION = "2.0"
ALLOWED_EXTENSIONS = {".pdf", ".docx", ".txt"}
USER_TYPE_PATTERN = "^(fresher|experienced|student)$"

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="Eleven-tier ATS resume scoring with evidence-locked scoring, bulk upload and reporting"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        # Skip docs and schema noise
        if request.url.path not in ("/docs", "/openapi.json", "/redoc"):
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method, request.url.path, response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response


app.add_middleware(RequestLogMiddleware)


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    init_db()


# ===== REQUEST MODELS =====

class ScoreRequest(BaseModel):
    resume_text: str
    resume_data: Optional[Dict[str, Any]] = None
    job_description: Optional[str] = None
    job_title: Optional[str] = None
    user_type: Optional[str] = Field(None, pattern=USER_TYPE_PATTERN)
    extraction_mode: ExtractionMode = ExtractionMode.TEXT
    filename: Optional[str] = None
    save: bool = True


class EvidenceRequest(BaseModel):
    resume_text: str
    job_description: str
    company_name: Optional[str] = None


class ClassifyRequest(BaseModel):
    job_description: str
    company_name: Optional[str] = None


class FormattingRequest(BaseModel):
    resume_text: str
    extraction_mode: ExtractionMode = ExtractionMode.TEXT
    column_count: int = Field(1, ge=1)
    textbox_count: int = Field(0, ge=0)
    table_count: int = Field(0, ge=0)


class BulletFixRequest(BaseModel):
    resume_data: Dict[str, Any]


# ===== HELPERS =====

def require_api_key(x_api_key: Optional[str]):
    if x_api_key != API_KEY:
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


def extract_text_from_file(path: Path) -> str:
    """Extract text from PDF, DOCX, or TXT files"""
    suffix = path.suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise ValueError(f"Unsupported file type '{suffix or path.name}'. Use PDF, DOCX or TXT")
    try:
        if suffix == ".pdf":
            return pdf_extract_text(str(path))
        elif suffix == ".docx":
            return docx2txt.process(str(path))
        else:
            return path.read_text(encoding="utf-8", errors="ignore")
    except Exception as e:
        raise ValueError(f"Could not extract text from {path.name}: {str(e)}")


async def read_upload(file: UploadFile) -> Tuple[str, float]:
    """Returns extracted text and the upload size in KB"""
    suffix = Path(file.filename or "").suffix
    if suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValueError(f"Unsupported file type '{suffix or file.filename}'. Use PDF, DOCX or TXT")

    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp_path = Path(tmp.name)
    try:
        content = await file.read()
        tmp_path.write_bytes(content)
        return extract_text_from_file(tmp_path), round(len(content) / 1024, 1)
    finally:
        os.remove(tmp_path)


def run_scoring(
    resume_text: str,
    resume_data: Optional[Dict[str, Any]] = None,
    job_description: Optional[str] = None,
    job_title: Optional[str] = None,
    user_type: Optional[str] = None,
    extraction_mode: ExtractionMode = ExtractionMode.TEXT,
    filename: Optional[str] = None,
    file_size_kb: Optional[float] = None,
):
    data = parse_resume_data(resume_data)
    result = EnhancedScoringService.score(ScoringInput(
        resume_text=resume_text,
        resume_data=data,
        job_description=job_description,
        job_title=job_title,
        extraction_mode=extraction_mode,
        filename=filename,
        user_type=user_type,
        file_size_kb=file_size_kb,
    ))
    return result, data


def store(db: Session, result, resume_text: str, filename: Optional[str], name: str, jd: Optional[str]) -> Analysis:
    return save_analysis(
        db,
        result,
        resume_text=resume_text,
        filename=filename,
        user_id=DEFAULT_USER_ID,
        candidate_name=name or filename,
        has_job_description=bool(jd),
    )


def summary_row(filename: Optional[str], analysis_id: Optional[str], result) -> Dict[str, Any]:
    return {
        "filename": filename,
        "analysis_id": analysis_id,
        "scoring_status": result.status,
        "overall": result.score.get("overall"),
        "match_band": result.score.get("match_band"),
        "confidence": result.score.get("confidence"),
        "candidate_level": result.score.get("candidate_level"),
        "auto_reject_risk": result.score.get("auto_reject_risk"),
        "status": "success",
    }


# ===== ENDPOINTS =====

@app.get("/")
def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "rubric_version": RUBRIC_VERSION,
        "tables_version": TABLES_VERSION,
        "description": "Multi-tier ATS resume scoring with bulk upload and reporting",
        "features": [
            "Eleven-tier scoring with Big 5 critical metrics",
            "Input quality gate and candidate-level weighting",
            "Evidence-locked scoring",
            "Role, domain and seniority classification",
            "Formatting assessment and bullet length fixes",
            f"Bulk upload (up to {MAX_BULK_FILES} resumes)",
            "Analysis history & export to CSV/JSON",
        ]
    }


@app.get("/health")
def health():
    return {"status": "ok", "version": SERVICE_VERSION}


@app.post("/score")
def score(
    request: ScoreRequest,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Score resume text with optional structured data and job description"""

    require_api_key(x_api_key)

    try:
        result, data = run_scoring(
            request.resume_text,
            resume_data=request.resume_data,
            job_description=request.job_description,
            job_title=request.job_title,
            user_type=request.user_type,
            extraction_mode=request.extraction_mode,
            filename=request.filename,
        )
    except ResumeDataError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    except Exception as e:
        logger.exception("Scoring failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")

    response = result.to_dict()
    if request.save:
        analysis = store(db, result, request.resume_text, request.filename, data.name, request.job_description)
        response["analysis_id"] = analysis.id
        response["analyzed_at"] = analysis.analyzed_at.isoformat()
    return response


@app.post("/score_auto")
async def score_auto(
    file: UploadFile = File(...),
    job_description: Optional[str] = Form(None),
    user_type: Optional[str] = Form(None, pattern=USER_TYPE_PATTERN),
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Upload single resume, score it and store the analysis"""

    require_api_key(x_api_key)

    try:
        text, size_kb = await read_upload(file)
        result, data = run_scoring(
            text, job_description=job_description, user_type=user_type,
            filename=file.filename, file_size_kb=size_kb
        )
        analysis = store(db, result, text, file.filename, data.name, job_description)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.exception("Scoring failed for %s", file.filename)
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")

    response = result.to_dict()
    response["analysis_id"] = analysis.id
    response["analyzed_at"] = analysis.analyzed_at.isoformat()
    return JSONResponse(response)


@app.post("/score_bulk")
async def score_bulk(
    files: List[UploadFile] = File(...),
    job_description: Optional[str] = Form(None),
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Upload up to RT_MAX_BULK resumes and get batch analysis"""

    require_api_key(x_api_key)

    if len(files) > MAX_BULK_FILES:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_BULK_FILES} files per batch")

    results = []
    errors = []

    for file in files:
        try:
            text, size_kb = await read_upload(file)
            result, data = run_scoring(
                text, job_description=job_description, filename=file.filename, file_size_kb=size_kb
            )
            analysis = store(db, result, text, file.filename, data.name, job_description)
            results.append(summary_row(file.filename, analysis.id, result))
        except Exception as e:
            logger.warning("Bulk scoring failed for %s: %s", file.filename, e)
            errors.append({
                "filename": file.filename,
                "error": str(e),
                "status": "failed"
            })

    return JSONResponse({
        "batch_id": f"batch_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}",
        "total_files": len(files),
        "successful": len(results),
        "failed": len(errors),
        "results": results,
        "errors": errors
    })


@app.post("/score_evidence")
def score_evidence(request: EvidenceRequest, x_api_key: Optional[str] = Header(None)):
    """Evidence-locked score: components without evidence are blocked, not zeroed"""

    require_api_key(x_api_key)

    classification = classify_role(request.job_description, request.company_name)
    result = score_with_evidence(request.resume_text, request.job_description, classification)
    matching = match_jd_to_resume(request.job_description, request.resume_text)
    gaps = identify_skill_gaps(matching)
    return {
        **result.to_dict(),
        "role_classification": classification.to_dict(),
        "coverage": round(matching.overall_coverage, 3),
        "skill_gaps": {
            "critical": [r.text for r in gaps["critical_gaps"]],
            "nice_to_have": [r.text for r in gaps["nice_to_have_gaps"]],
            "gap_percentage": round(gaps["gap_percentage"], 3),
        },
        "report": generate_evidence_report(result),
        "match_report": generate_match_report(matching),
    }


@app.post("/classify_role")
def classify(request: ClassifyRequest, x_api_key: Optional[str] = Header(None)):
    """Role, domain and seniority of a job description"""

    require_api_key(x_api_key)

    classification = classify_role(request.job_description, request.company_name)
    return {
        **classification.to_dict(),
        "optimization_strategy": get_optimization_strategy(classification),
    }


@app.post("/formatting")
def formatting(request: FormattingRequest, x_api_key: Optional[str] = Header(None)):
    """ATS formatting assessment for text plus layout hints"""

    require_api_key(x_api_key)

    assessment = analyze_formatting(DocumentLayout(
        text=request.resume_text,
        extraction_mode=request.extraction_mode,
        column_count=request.column_count,
        textbox_count=request.textbox_count,
        table_count=request.table_count,
    ))
    return {
        **assessment.to_dict(),
        "violations": validate_assessment(assessment),
        "fix_first": [i.description for i in improvement_priority(assessment.issues)[:3]],
        "summary": generate_summary(assessment),
    }


@app.post("/fix_bullets")
def fix_bullets(request: BulletFixRequest, x_api_key: Optional[str] = Header(None)):
    """Scan structured resume data for bullets over the ATS length limit and fix them"""

    require_api_key(x_api_key)

    try:
        data = parse_resume_data(request.resume_data)
    except ResumeDataError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})

    analysis = scan_bullets(data)
    fixed = apply_fixes(data, analysis)
    return {
        "summary": violation_summary(analysis),
        "analysis": analysis.to_dict(),
        "resume_data": fixed.model_dump(by_alias=True),
        "report": generate_fix_report(analysis),
    }


@app.get("/analyses/history")
async def get_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    min_score: Optional[float] = Query(None, ge=0, le=100),
    max_score: Optional[float] = Query(None, ge=0, le=100),
    match_band: Optional[str] = None,
    candidate_level: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Get paginated history with filtering"""

    require_api_key(x_api_key)

    query = db.query(Analysis).filter(Analysis.user_id == DEFAULT_USER_ID)

    if min_score is not None:
        query = query.filter(Analysis.overall_score >= min_score)
    if max_score is not None:
        query = query.filter(Analysis.overall_score <= max_score)
    if match_band:
        query = query.filter(Analysis.match_band == match_band)
    if candidate_level:
        query = query.filter(Analysis.candidate_level == candidate_level)
    try:
        if start_date:
            query = query.filter(Analysis.analyzed_at >= datetime.fromisoformat(start_date))
        if end_date:
            query = query.filter(Analysis.analyzed_at <= datetime.fromisoformat(end_date))
    except ValueError:
        raise HTTPException(status_code=400, detail="Dates must be ISO 8601")

    total = query.count()
    analyses = query.order_by(Analysis.analyzed_at.desc()).offset(offset).limit(limit).all()

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "results": [analysis.to_dict(include_report=False) for analysis in analyses]
    }


# Declared before /analyses/{analysis_id} so "export" is not read as an id
@app.get("/analyses/export")
async def export_analyses(
    format: str = Query("csv", pattern="^(csv|json)$"),
    analysis_ids: Optional[List[str]] = Query(None),
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Export analyses to CSV or JSON"""

    require_api_key(x_api_key)

    query = db.query(Analysis).filter(Analysis.user_id == DEFAULT_USER_ID)
    if analysis_ids:
        query = query.filter(Analysis.id.in_(analysis_ids))
    analyses = query.order_by(Analysis.analyzed_at.desc()).all()

    if format == "csv":
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([
            "Candidate", "Filename", "Status", "Score", "Match Band", "Confidence",
            "Input Quality", "Candidate Level", "Auto Reject Risk", "Red Flags",
            "Missing Keywords", "Analyzed At"
        ])

        for analysis in analyses:
            writer.writerow([
                analysis.candidate_name,
                analysis.filename or "",
                analysis.status,
                analysis.overall_score,
                analysis.match_band,
                analysis.confidence,
                analysis.input_quality,
                analysis.candidate_level or "",
                "yes" if analysis.auto_reject_risk else "no",
                len(analysis.red_flags) if analysis.red_flags else 0,
                len(analysis.missing_keywords) if analysis.missing_keywords else 0,
                analysis.analyzed_at.isoformat()
            ])

        output.seek(0)
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename=resumetier_export_{datetime.utcnow().strftime('%Y%m%d')}.csv"}
        )

    else:
        return {
            "exported_at": datetime.utcnow().isoformat(),
            "total_analyses": len(analyses),
            "analyses": [analysis.to_dict() for analysis in analyses]
        }


@app.get("/analyses/{analysis_id}")
async def get_analysis(
    analysis_id: str,
    x_api_key: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """Retrieve specific analysis by ID"""

    require_api_key(x_api_key)

    analysis = db.query(Analysis).filter(Analysis.id == analysis_id).first()

    if not analysis:
        raise HTTPException(status_code=404, detail="Analysis not found")

    return analysis.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
