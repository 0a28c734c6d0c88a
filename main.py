#backend/main.py
from typing import Optional

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import SETTINGS
from db import get_db
from logic import catalog, history, progress, recommendation, reports
from logic.errors import LearningError
from utils.setup_logger import setup_logger

logger = setup_logger(
    __name__,
    log_dir=SETTINGS.log_dir,
    log_file="api.log",
    console_level=SETTINGS.console_level,
)


# --------- App Setup ---------
app = FastAPI(title="TrainSphere Learning API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------- Error Handlers ---------
@app.exception_handler(LearningError)
async def learning_error_handler(request: Request, exc: LearningError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid parameters", "detail": jsonable_errors(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Store error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# --------- Identity ---------
def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> int:
    """
    Caller identity, set by the authentication layer in front of this service.
    """
    if not x_user_id or not x_user_id.isdigit() or int(x_user_id) < 1:
        raise StarletteHTTPException(status_code=401, detail="Authentication required")
    return int(x_user_id)


# --------- Pydantic Models ---------
class RegisterInput(BaseModel):
    username: str = Field(..., min_length=1, examples=["alex"])
    name: str = Field(..., min_length=1, examples=["Alex Morgan"])
    email: str = Field(..., min_length=3, examples=["alex@example.com"])
    role: Optional[str] = Field(None, examples=["manager"])


class ProgressInput(BaseModel):
    progress: int = Field(..., ge=0, le=100, examples=[45])

    @field_validator("progress", mode="before")
    def reject_bool(cls, value):
        # JSON true/false would otherwise coerce to 1/0
        if isinstance(value, bool):
            raise ValueError("Progress must be a number")
        return value


# --------- Endpoints ---------
@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/register", status_code=201)
def register(data: RegisterInput, db: Session = Depends(get_db)):
    return catalog.register_user(db, data.username, data.name, data.email, data.role)


@app.get("/user")
def get_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.get_user(db, user_id)


@app.get("/recommendations")
def get_recommendations(
    sort_by: str = Query(recommendation.SORT_RELEVANCE, alias="sortBy"),
    limit: int = Query(SETTINGS.recommendation_limit, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    # Larger requests are served, capped at the configured maximum
    limit = min(limit, SETTINGS.recommendation_limit_max)
    return recommendation.recommend_courses(db, user_id, sort_by=sort_by, limit=limit)


@app.get("/courses")
def get_courses(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.list_courses(db, user_id)


@app.get("/courses/popular")
def get_popular_courses(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return reports.popular_courses(db, limit=limit)


@app.get("/courses/{course_id}")
def get_course(course_id: int, db: Session = Depends(get_db)):
    return catalog.get_course(db, course_id)


@app.post("/courses/{course_id}/progress")
def update_course_progress(
    course_id: int,
    data: ProgressInput,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    record = progress.update_progress(db, user_id, course_id, data.progress)
    return progress.progress_to_dict(record)


@app.post("/courses/{course_id}/dismiss")
def dismiss_course(
    course_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    record = progress.dismiss_course(db, user_id, course_id)
    return progress.progress_to_dict(record)


@app.get("/history")
def get_history(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return history.get_training_history(db, user_id)


@app.get("/skills")
def get_skills(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return catalog.get_skills(db, user_id)


@app.get("/skills/gaps")
def get_skill_gaps(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return reports.skill_gap_report(db, user_id)


@app.get("/report")
def get_activity_report(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return reports.activity_report(db, user_id)
