"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 예약 작업 러너를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tutorial_cms.config import settings
from tutorial_cms.database import Base, SessionLocal, engine
from tutorial_cms.errors import LifecycleError
import tutorial_cms.models  # noqa: F401 - 모델 import로 metadata 등록
from tutorial_cms.routers import approvals, auth, pages, scheduled_content, tutorials, versions
from tutorial_cms.services.scheduler import ScheduledContentRunner
from tutorial_cms.utils.schema_sync import sync_missing_schema_objects

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Tutorial CMS",
    description="튜토리얼/페이지 콘텐츠의 버전 이력, 예약 게시, 검토 승인을 관리하는 CMS",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(tutorials.router)
app.include_router(pages.router)
app.include_router(versions.router)
app.include_router(scheduled_content.router)
app.include_router(approvals.router)

runner = ScheduledContentRunner(SessionLocal, settings.SCHEDULER_INTERVAL_SECONDS)


@app.exception_handler(LifecycleError)
def lifecycle_error_handler(request: Request, exc: LifecycleError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블/컬럼/인덱스를 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    sync_missing_schema_objects(engine, Base.metadata)
    if settings.SCHEDULER_ENABLED:
        runner.start()


@app.on_event("shutdown")
def stop_runner():
    runner.stop()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Tutorial CMS", "scheduler": runner.running}
