"""
pytest 설정 및 공통 fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pipeline_dashboard.db import Base
from pipeline_dashboard import models  # noqa: F401
from pipeline_dashboard.aws.codepipeline import Pipeline, PipelineExecution, PipelineStage
from pipeline_dashboard.services.cache import CachedValue
from pipeline_dashboard.services.pipeline_state import PipelineStateStore
from pipeline_dashboard.services.toasts import ToastCenter
from pipeline_dashboard.services.transitions import StageTransitionGateway


# 테스트용 인메모리 SQLite DB
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_stages(names, enabled):
    """names 순서대로 연결된 stage 목록. enabled[i] 는 names[i] 의 inbound 상태."""
    raw = [
        {"stageName": n, "inboundTransitionState": {"enabled": e}}
        for n, e in zip(names, enabled)
    ]
    return PipelineStage.link_from_aws(raw)


class FakeCodePipelineClient:
    """CodePipelineClient 대역.

    호출을 기록하고, 성공한 enable/disable 은 이후 get_pipeline_state 에 반영한다.
    fail 로 에러 주입, gate 로 원격 호출을 붙잡아 둘 수 있다.
    """

    def __init__(self, pipelines=None, layouts=None):
        self.pipelines = pipelines or []
        self.layouts = {name: (list(names), list(enabled)) for name, (names, enabled) in (layouts or {}).items()}
        self.stages = {name: make_stages(*layout) for name, layout in self.layouts.items()}
        self.calls = []
        self.fail: Exception | None = None
        self.gate: threading.Event | None = None
        self.entered = threading.Event()
        self.list_calls = 0
        self.state_calls = 0

    def set_transition(self, pipeline_name, stage_name, enabled):
        names, flags = self.layouts[pipeline_name]
        flags[names.index(stage_name)] = enabled
        self.stages[pipeline_name] = make_stages(names, flags)

    def list_pipelines(self):
        self.list_calls += 1
        return [p.model_copy(deep=True) for p in self.pipelines]

    def get_pipeline_state(self, pipeline_name):
        self.state_calls += 1
        return self.stages.get(pipeline_name, [])

    def _remote(self, kind, params, pipeline_name, stage_name, enabled):
        self.calls.append((kind, params))
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fail:
            raise self.fail
        if pipeline_name in self.layouts:
            self.set_transition(pipeline_name, stage_name, enabled)

    def enable_stage_transition(self, pipeline_name, stage_name):
        params = {"pipelineName": pipeline_name, "stageName": stage_name, "transitionType": "Inbound"}
        self._remote("enable", params, pipeline_name, stage_name, True)

    def disable_stage_transition(self, pipeline_name, stage_name, reason):
        params = {"pipelineName": pipeline_name, "stageName": stage_name, "transitionType": "Inbound", "reason": reason}
        self._remote("disable", params, pipeline_name, stage_name, False)


@pytest.fixture(scope="function")
def db_session():
    """테스트용 DB 세션"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sample_pipelines():
    return [
        Pipeline(
            name="build-pipe",
            version=3,
            latest_execution=PipelineExecution(
                pipeline_execution_id="exec-1", status="InProgress", status_summary="Running"
            ),
        ),
        Pipeline(
            name="other-pipe",
            version=1,
            latest_execution=PipelineExecution(pipeline_execution_id="exec-2", status="Succeeded"),
        ),
    ]


@pytest.fixture
def fake_client(sample_pipelines):
    return FakeCodePipelineClient(
        pipelines=sample_pipelines,
        layouts={"build-pipe": (["Source", "Deploy", "Release"], [False, True, True])},
    )


@pytest.fixture
def toasts():
    return ToastCenter(history_size=10)


@pytest.fixture
def captured():
    return []


@pytest.fixture
def gateway(fake_client, toasts, captured):
    return StageTransitionGateway(fake_client, toasts, capture=captured.append)


@pytest.fixture
def pipeline_cache(fake_client):
    cache = CachedValue(fake_client.list_pipelines, name="pipelines")
    cache.revalidate()
    fake_client.list_calls = 0
    return cache


@pytest.fixture
def state_store(fake_client):
    return PipelineStateStore(fake_client)
