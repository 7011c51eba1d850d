import math
from datetime import datetime
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from pipeline_dashboard.aws.codepipeline import Pipeline
from pipeline_dashboard.models import PipelineVisit

HALF_LIFE_DAYS = 10.0


def record_visit(db: Session, pipeline: Pipeline, now: datetime | None = None) -> PipelineVisit:
    now = now or datetime.utcnow()
    v = db.get(PipelineVisit, pipeline.name)
    if v is None:
        v = PipelineVisit(name=pipeline.name, visit_count=0)
        db.add(v)
    v.visit_count = (v.visit_count or 0) + 1
    v.last_visited_at = now
    db.commit()
    return v


def frecency(v: PipelineVisit, now: datetime | None = None) -> float:
    """방문 횟수 * 반감기 감쇠."""
    now = now or datetime.utcnow()
    age_days = max(0.0, (now - v.last_visited_at).total_seconds() / 86400.0)
    return v.visit_count * math.pow(0.5, age_days / HALF_LIFE_DAYS)


def sort_by_frecency(db: Session, pipelines: Iterable[Pipeline], now: datetime | None = None) -> List[Pipeline]:
    items = list(pipelines)
    names = [p.name for p in items]
    if not names:
        return items
    rows = db.execute(select(PipelineVisit).where(PipelineVisit.name.in_(names))).scalars().all()
    scores = {r.name: frecency(r, now) for r in rows}
    # 안정 정렬: 방문 기록 없는 pipeline 은 원래 순서 유지
    return sorted(items, key=lambda p: -scores.get(p.name, 0.0))


class VisitRecorder:
    def __init__(self, db: Session):
        self.db = db

    def __call__(self, pipeline: Pipeline) -> None:
        record_visit(self.db, pipeline)
