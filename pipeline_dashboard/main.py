from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pipeline_dashboard.settings import Settings
from pipeline_dashboard.logging_ import configure_logging
from pipeline_dashboard.db import Base, engine
from pipeline_dashboard import models  # noqa: F401  (테이블 등록)
from pipeline_dashboard.routers import health, pipelines, toasts

settings = Settings()
configure_logging(settings.log_level)

app = FastAPI(title="pipeline-dashboard", version=settings.version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(health.router)
app.include_router(pipelines.router, prefix="/api", tags=["pipelines"])
app.include_router(toasts.router, prefix="/api", tags=["toasts"])

@app.get("/")
def root():
    return {"service": "pipeline-dashboard", "version": settings.version}
