from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal

from pydantic import BaseModel

PipelineExecutionStatus = Literal[
    "Cancelled",
    "InProgress",
    "Stopped",
    "Stopping",
    "Succeeded",
    "Superseded",
    "Failed",
]

STATUS_STOPPED: PipelineExecutionStatus = "Stopped"


class PipelineExecution(BaseModel):
    pipeline_execution_id: str | None = None
    status: PipelineExecutionStatus | None = None
    status_summary: str | None = None

    @classmethod
    def from_aws(cls, raw: Dict[str, Any]) -> "PipelineExecution":
        return cls(
            pipeline_execution_id=raw.get("pipelineExecutionId"),
            status=raw.get("status"),
            status_summary=raw.get("statusSummary"),
        )


class Pipeline(BaseModel):
    name: str
    version: int | None = None
    created: datetime | None = None
    updated: datetime | None = None
    latest_execution: PipelineExecution | None = None

    @classmethod
    def from_aws(cls, summary: Dict[str, Any], latest: Dict[str, Any] | None = None) -> "Pipeline":
        return cls(
            name=summary["name"],
            version=summary.get("version"),
            created=summary.get("created"),
            updated=summary.get("updated"),
            latest_execution=PipelineExecution.from_aws(latest) if latest else None,
        )


class TransitionState(BaseModel):
    enabled: bool = False
    last_changed_by: str | None = None
    last_changed_at: datetime | None = None
    disabled_reason: str | None = None

    @classmethod
    def from_aws(cls, raw: Dict[str, Any]) -> "TransitionState":
        return cls(
            enabled=bool(raw.get("enabled")),
            last_changed_by=raw.get("lastChangedBy"),
            last_changed_at=raw.get("lastChangedAt"),
            disabled_reason=raw.get("disabledReason"),
        )


class PipelineStage(BaseModel):
    stage_name: str
    inbound_transition_state: TransitionState | None = None
    latest_status: str | None = None
    next_stage: PipelineStage | None = None

    @property
    def inbound_enabled(self) -> bool:
        """inbound transition 상태가 없으면 disabled 로 본다."""
        return bool(self.inbound_transition_state and self.inbound_transition_state.enabled)

    @staticmethod
    def link_from_aws(stage_states: List[Dict[str, Any]]) -> List["PipelineStage"]:
        """GetPipelineState 의 stageStates 를 순서대로 next_stage 로 연결한다."""
        stages: List[PipelineStage] = []
        nxt: PipelineStage | None = None
        # 뒤에서부터 만들어야 next_stage 를 바로 연결할 수 있음
        for raw in reversed(stage_states):
            ts = raw.get("inboundTransitionState")
            latest = raw.get("latestExecution") or {}
            stage = PipelineStage(
                stage_name=raw["stageName"],
                inbound_transition_state=TransitionState.from_aws(ts) if ts else None,
                latest_status=latest.get("status"),
                next_stage=nxt,
            )
            stages.append(stage)
            nxt = stage
        stages.reverse()
        return stages
