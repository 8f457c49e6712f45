from contextlib import asynccontextmanager
from typing import List, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from common.config import get_settings
from common.database import Base, engine, get_db
from common.dependencies import require_service_key
from common.logging_middleware import add_audit_middleware
from common.models import Review
from common.orm import QueryError, factory
from common.rate_limit import READ_LIMIT, WRITE_LIMIT, apply_rate_limiter, limiter
from common.schemas import ReviewCreate, ReviewRead, ReviewStats, ReviewUpdate
from common.views import ViewNotFound
from services.reviews.controllers import ReviewsController, invalidate_listing

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="Reviews Board", version="0.1.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_rate_limiter(fastapi_app)
    audit_log = add_audit_middleware(fastapi_app, "reviews")

    @fastapi_app.exception_handler(QueryError)
    async def query_error_handler(_: Request, exc: QueryError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @fastapi_app.exception_handler(ViewNotFound)
    async def view_not_found_handler(request: Request, exc: ViewNotFound) -> JSONResponse:
        audit_log.error("missing view %s while serving %s", exc.name, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Page unavailable"})

    @fastapi_app.exception_handler(OperationalError)
    async def database_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
        audit_log.error("database error while serving %s: %s", request.url.path, exc.orig)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": "Database unavailable"})

    Instrumentator().instrument(fastapi_app).expose(fastapi_app, include_in_schema=False)
    return fastapi_app


app = create_app()


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "reviews"}


# ---- pages ----


@app.get("/reviews", tags=["pages"])
@limiter.limit(READ_LIMIT)
def reviews_page(request: Request, db: Session = Depends(get_db)):
    return ReviewsController(request, db).execute("index")


@app.get("/reviews/{review_id}", tags=["pages"])
@limiter.limit(READ_LIMIT)
def review_page(request: Request, review_id: int, db: Session = Depends(get_db)):
    return ReviewsController(request, db).execute("view", review_id=review_id)


# ---- JSON API ----


def _get_review_or_404(db: Session, review_id: int) -> Review:
    review = factory("Review", db).where("id", "=", review_id).find()
    if review is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return review


@app.get("/api/reviews", response_model=List[ReviewRead], tags=["reviews"])
@limiter.limit(READ_LIMIT)
def list_reviews(
    request: Request,
    min_rating: Optional[int] = Query(None, ge=0, le=5, description="Only reviews rated above this"),
    order: Literal["asc", "desc"] = Query("desc", description="Sort direction on posted_on"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Review]:
    threshold = settings.reviews_min_rating if min_rating is None else min_rating
    return (
        factory("Review", db)
        .where("rating", ">", threshold)
        .order_by("posted_on", order)
        .limit(limit)
        .offset(offset)
        .find_all()
    )


@app.get("/api/reviews/stats", response_model=ReviewStats, tags=["reviews"])
@limiter.limit(READ_LIMIT)
def review_stats(request: Request, db: Session = Depends(get_db)) -> ReviewStats:
    average = db.query(func.avg(Review.rating)).scalar()
    return ReviewStats(
        average_rating=round(float(average), 2) if average is not None else 0.0,
        total_reviews=factory("Review", db).count_all(),
    )


@app.get("/api/reviews/{review_id}", response_model=ReviewRead, tags=["reviews"])
@limiter.limit(READ_LIMIT)
def get_review(request: Request, review_id: int, db: Session = Depends(get_db)) -> Review:
    return _get_review_or_404(db, review_id)


@app.post(
    "/api/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    tags=["reviews"],
    dependencies=[Depends(require_service_key)],
)
@limiter.limit(WRITE_LIMIT)
def create_review(request: Request, review_in: ReviewCreate, db: Session = Depends(get_db)) -> Review:
    review = Review(**review_in.model_dump(exclude_none=True))
    db.add(review)
    db.commit()
    db.refresh(review)
    invalidate_listing()
    return review


@app.put(
    "/api/reviews/{review_id}",
    response_model=ReviewRead,
    tags=["reviews"],
    dependencies=[Depends(require_service_key)],
)
@limiter.limit(WRITE_LIMIT)
def update_review(
    request: Request,
    review_id: int,
    review_update: ReviewUpdate,
    db: Session = Depends(get_db),
) -> Review:
    review = _get_review_or_404(db, review_id)
    for key, value in review_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(review, key, value)
    db.commit()
    db.refresh(review)
    invalidate_listing()
    return review


@app.delete(
    "/api/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["reviews"],
    dependencies=[Depends(require_service_key)],
)
@limiter.limit(WRITE_LIMIT)
def delete_review(request: Request, review_id: int, db: Session = Depends(get_db)) -> None:
    review = _get_review_or_404(db, review_id)
    db.delete(review)
    db.commit()
    invalidate_listing()
