from .client import CodePipelineClient, TRANSITION_INBOUND
from .schemas import Pipeline, PipelineExecution, PipelineStage, TransitionState

__all__ = [
    "CodePipelineClient",
    "TRANSITION_INBOUND",
    "Pipeline",
    "PipelineExecution",
    "PipelineStage",
    "TransitionState",
]
