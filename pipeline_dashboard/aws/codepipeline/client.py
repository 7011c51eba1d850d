import logging
from typing import Any, Dict, List

import boto3
from botocore.config import Config

from .schemas import Pipeline, PipelineStage

log = logging.getLogger("codepipeline")

TRANSITION_INBOUND = "Inbound"


class CodePipelineClient:
    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
        client: Any = None,
    ):
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client(
                "codepipeline",
                config=Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
            )
        self.c = client

    @classmethod
    def from_settings(cls, settings) -> "CodePipelineClient":
        return cls(
            region=settings.aws_region,
            profile=settings.aws_profile,
            connect_timeout=settings.aws_connect_timeout,
            read_timeout=settings.aws_read_timeout,
        )

    def _latest_execution(self, pipeline_name: str) -> Dict[str, Any] | None:
        r = self.c.list_pipeline_executions(pipelineName=pipeline_name, maxResults=1)
        items = r.get("pipelineExecutionSummaries") or []
        return items[0] if items else None

    def list_pipelines(self) -> List[Pipeline]:
        out: List[Pipeline] = []
        next_token = None
        while True:
            kwargs = {"nextToken": next_token} if next_token else {}
            r = self.c.list_pipelines(**kwargs)
            for summary in r.get("pipelines", []):
                out.append(Pipeline.from_aws(summary, self._latest_execution(summary["name"])))
            next_token = r.get("nextToken")
            if not next_token:
                break
        log.debug("listed %d pipelines", len(out))
        return out

    def get_pipeline_state(self, pipeline_name: str) -> List[PipelineStage]:
        r = self.c.get_pipeline_state(name=pipeline_name)
        return PipelineStage.link_from_aws(r.get("stageStates", []))

    def enable_stage_transition(self, pipeline_name: str, stage_name: str) -> None:
        self.c.enable_stage_transition(
            pipelineName=pipeline_name,
            stageName=stage_name,
            transitionType=TRANSITION_INBOUND,
        )

    def disable_stage_transition(self, pipeline_name: str, stage_name: str, reason: str) -> None:
        self.c.disable_stage_transition(
            pipelineName=pipeline_name,
            stageName=stage_name,
            transitionType=TRANSITION_INBOUND,
            reason=reason,
        )
