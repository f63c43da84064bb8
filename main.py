import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import content
from config import get_settings
from database import Store, StoreError, connect
from schemas import (
    Header,
    HeaderRecord,
    Introduction,
    IntroductionRecord,
    ProjectCreate,
    ProjectDetail,
    ProjectDetailRecord,
    ProjectDetailUpdate,
    ProjectRecord,
    ProjectUpdate,
    WorkExperience,
    WorkExperienceRecord,
    WorkExperienceUpdate,
)

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class RecordId(BaseModel):
    # null when the write did not happen
    id: Optional[str] = None


# ==================
# FastAPI app config
# ==================
@asynccontextmanager
async def lifespan(app: FastAPI):
    # a store set up front (tests) is left alone
    opened = getattr(app.state, "store", None) is None
    if opened:
        app.state.store = connect(settings)
    yield
    if opened and app.state.store is not None:
        app.state.store.close()
        app.state.store = None


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store(request: Request) -> Store:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Database not available")
    return store


# ======
# Routes
# ======
@app.get("/")
def root():
    return {"status": "ok", "service": "portfolio-api"}


@app.get("/test")
def test_database(request: Request):
    store = getattr(request.app.state, "store", None)
    ok = store is not None
    collections = []
    if ok:
        try:
            collections = store.tables()
        except StoreError:
            logger.warning("Database check failed", exc_info=True)
            ok = False
    return {"backend": "running", "database": "connected" if ok else "not-available", "collections": collections[:10]}


# Header
@app.post("/api/header", response_model=RecordId)
def create_header(body: Header, store: Store = Depends(get_store)):
    return RecordId(id=content.create_header(store, body.name, body.description))


@app.get("/api/header", response_model=List[HeaderRecord])
def list_headers(store: Store = Depends(get_store)):
    return content.get_headers(store)


@app.get("/api/header/{header_id}", response_model=Optional[HeaderRecord])
def get_header(header_id: str, store: Store = Depends(get_store)):
    return content.get_header_by_id(store, header_id)


# Introduction
@app.post("/api/introductions", response_model=RecordId)
def create_introduction(body: Introduction, store: Store = Depends(get_store)):
    return RecordId(id=content.create_introduction(store, body.header, body.description, body.title))


@app.get("/api/introductions", response_model=List[IntroductionRecord])
def list_introductions(store: Store = Depends(get_store)):
    return content.get_introductions(store)


@app.get("/api/introductions/{introduction_id}", response_model=Optional[IntroductionRecord])
def get_introduction(introduction_id: str, store: Store = Depends(get_store)):
    return content.get_introduction_by_id(store, introduction_id)


# Projects
@app.post("/api/projects", response_model=RecordId)
def create_project(body: ProjectCreate, store: Store = Depends(get_store)):
    return RecordId(id=content.create_project(store, **body.model_dump()))


@app.get("/api/projects", response_model=List[ProjectRecord])
def list_projects(store: Store = Depends(get_store)):
    return content.get_projects(store)


@app.get("/api/projects/{project_id}", response_model=Optional[ProjectRecord])
def get_project(project_id: str, store: Store = Depends(get_store)):
    return content.get_project_by_id(store, project_id)


@app.patch("/api/projects/{project_id}", response_model=RecordId)
def update_project(project_id: str, body: ProjectUpdate, store: Store = Depends(get_store)):
    return RecordId(id=content.update_project(store, project_id, **body.model_dump(exclude_none=True)))


@app.delete("/api/projects/{project_id}", response_model=RecordId)
def delete_project(project_id: str, store: Store = Depends(get_store)):
    return RecordId(id=content.delete_project(store, project_id))


# Project details
@app.post("/api/project-details", response_model=RecordId)
def create_project_detail(body: ProjectDetail, store: Store = Depends(get_store)):
    return RecordId(id=content.create_project_detail(store, body.title, body.header, body.description))


@app.get("/api/project-details", response_model=List[ProjectDetailRecord])
def list_project_details(store: Store = Depends(get_store)):
    return content.get_project_details(store)


@app.get("/api/project-details/{detail_id}", response_model=Optional[ProjectDetailRecord])
def get_project_detail(detail_id: str, store: Store = Depends(get_store)):
    return content.get_project_detail_by_id(store, detail_id)


@app.patch("/api/project-details/{detail_id}", response_model=RecordId)
def update_project_detail(detail_id: str, body: ProjectDetailUpdate, store: Store = Depends(get_store)):
    return RecordId(id=content.update_project_detail(store, detail_id, **body.model_dump(exclude_none=True)))


@app.delete("/api/project-details/{detail_id}", response_model=RecordId)
def delete_project_detail(detail_id: str, store: Store = Depends(get_store)):
    return RecordId(id=content.delete_project_detail(store, detail_id))


# Work experience ("latest" routes must come before the {experience_id} ones)
@app.post("/api/experience", response_model=RecordId)
def create_work_experience(body: WorkExperience, store: Store = Depends(get_store)):
    return RecordId(id=content.create_work_experience(store, **body.model_dump()))


@app.get("/api/experience", response_model=List[WorkExperienceRecord])
def list_work_experiences(store: Store = Depends(get_store)):
    return content.get_work_experiences(store)


@app.get("/api/experience/latest", response_model=Optional[WorkExperienceRecord])
def get_latest_work_experience(store: Store = Depends(get_store)):
    return content.get_latest_work_experience(store)


@app.patch("/api/experience/latest", response_model=RecordId)
def update_latest_work_experience(body: WorkExperienceUpdate, store: Store = Depends(get_store)):
    return RecordId(id=content.update_latest_work_experience(store, **body.model_dump(exclude_none=True)))


@app.delete("/api/experience/latest", response_model=RecordId)
def delete_latest_work_experience(store: Store = Depends(get_store)):
    return RecordId(id=content.delete_latest_work_experience(store))


@app.get("/api/experience/{experience_id}", response_model=Optional[WorkExperienceRecord])
def get_work_experience(experience_id: str, store: Store = Depends(get_store)):
    return content.get_work_experience_by_id(store, experience_id)


@app.patch("/api/experience/{experience_id}", response_model=RecordId)
def update_work_experience(experience_id: str, body: WorkExperienceUpdate, store: Store = Depends(get_store)):
    return RecordId(id=content.update_work_experience(store, experience_id, **body.model_dump(exclude_none=True)))


@app.delete("/api/experience/{experience_id}", response_model=RecordId)
def delete_work_experience(experience_id: str, store: Store = Depends(get_store)):
    return RecordId(id=content.delete_work_experience(store, experience_id))


# For running directly: python main.py
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
