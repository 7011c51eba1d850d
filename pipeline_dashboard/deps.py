from functools import lru_cache
from typing import List

from fastapi import Depends

from pipeline_dashboard.aws.codepipeline import CodePipelineClient, Pipeline
from pipeline_dashboard.services.cache import CachedValue
from pipeline_dashboard.services.pipeline_state import PipelineStateStore
from pipeline_dashboard.services.toasts import ToastCenter
from pipeline_dashboard.services.transitions import StageTransitionGateway
from pipeline_dashboard.settings import Settings


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_client() -> CodePipelineClient:
    return CodePipelineClient.from_settings(get_settings())


@lru_cache
def get_toasts() -> ToastCenter:
    return ToastCenter(history_size=get_settings().toast_history_size)


@lru_cache
def get_pipeline_cache() -> CachedValue[List[Pipeline]]:
    client = get_client()
    return CachedValue(client.list_pipelines, name="pipelines")


@lru_cache
def get_state_store() -> PipelineStateStore:
    return PipelineStateStore(get_client())


def get_gateway(
    client: CodePipelineClient = Depends(get_client),
    toasts: ToastCenter = Depends(get_toasts),
) -> StageTransitionGateway:
    return StageTransitionGateway(client, toasts)
