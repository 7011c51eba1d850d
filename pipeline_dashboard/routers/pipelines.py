import logging
from typing import List

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pipeline_dashboard.aws.codepipeline import Pipeline
from pipeline_dashboard.db import get_db
from pipeline_dashboard.deps import get_gateway, get_pipeline_cache, get_state_store
from pipeline_dashboard.services.cache import CachedValue
from pipeline_dashboard.services.errors import get_error_message
from pipeline_dashboard.services.menu import ToggleStageTransitionAction
from pipeline_dashboard.services.pipeline_state import PipelineStateStore
from pipeline_dashboard.services.transitions import StageTransitionGateway
from pipeline_dashboard.services.visits import VisitRecorder, sort_by_frecency

log = logging.getLogger("pipelines")
router = APIRouter()

_REMOTE_ERRORS = (ClientError, BotoCoreError)


def _dump(pipelines: List[Pipeline] | None) -> list[dict]:
    return [p.model_dump(mode="json") for p in pipelines or []]


def _find_pipeline(cache: CachedValue[List[Pipeline]], name: str) -> Pipeline:
    try:
        pipelines = cache.get() or []
    except _REMOTE_ERRORS as err:
        raise HTTPException(502, get_error_message(err))
    for p in pipelines:
        if p.name == name:
            return p
    raise HTTPException(404, "pipeline not found")


def _action(
    name: str,
    cache: CachedValue[List[Pipeline]],
    store: PipelineStateStore,
    gateway: StageTransitionGateway,
    db: Session,
) -> ToggleStageTransitionAction:
    pipeline = _find_pipeline(cache, name)
    return ToggleStageTransitionAction(pipeline, store, cache.mutate, VisitRecorder(db), gateway)


@router.get("/pipelines")
def list_pipelines(
    cache: CachedValue[List[Pipeline]] = Depends(get_pipeline_cache),
    db: Session = Depends(get_db),
):
    try:
        pipelines = cache.get() or []
    except _REMOTE_ERRORS as err:
        raise HTTPException(502, get_error_message(err))
    return {"items": _dump(sort_by_frecency(db, pipelines))}


@router.post("/pipelines/revalidate")
def revalidate_pipelines(cache: CachedValue[List[Pipeline]] = Depends(get_pipeline_cache)):
    try:
        pipelines = cache.revalidate()
    except _REMOTE_ERRORS as err:
        raise HTTPException(502, get_error_message(err))
    return {"items": _dump(pipelines)}


@router.get("/pipelines/{pipeline_name}/transitions")
def list_transitions(
    pipeline_name: str,
    cache: CachedValue[List[Pipeline]] = Depends(get_pipeline_cache),
    store: PipelineStateStore = Depends(get_state_store),
    gateway: StageTransitionGateway = Depends(get_gateway),
    db: Session = Depends(get_db),
):
    """Toggle Stage Transition 서브메뉴 열기 (stage 목록 재조회)"""
    action = _action(pipeline_name, cache, store, gateway, db)
    try:
        entries = action.open()
    except _REMOTE_ERRORS as err:
        raise HTTPException(502, get_error_message(err))
    return {
        "title": action.title,
        "shortcut": action.shortcut,
        "is_loading": action.is_loading,
        "items": [e.to_dict() for e in entries],
    }


@router.post("/pipelines/{pipeline_name}/transitions/{stage_name}/toggle")
def toggle_transition(
    pipeline_name: str,
    stage_name: str,
    cache: CachedValue[List[Pipeline]] = Depends(get_pipeline_cache),
    store: PipelineStateStore = Depends(get_state_store),
    gateway: StageTransitionGateway = Depends(get_gateway),
    db: Session = Depends(get_db),
):
    action = _action(pipeline_name, cache, store, gateway, db)
    try:
        action.open()
        entry = action.find(stage_name)
        if entry is None:
            raise HTTPException(404, "transition not found")
        entry.select()
    except _REMOTE_ERRORS as err:
        raise HTTPException(502, get_error_message(err))
    log.info("toggled %s (was enabled=%s)", entry.key, entry.transition_enabled)
    return {
        "ok": True,
        "key": entry.key,
        "transition_enabled": not entry.transition_enabled,
        "pipelines": _dump(cache.data),
    }
