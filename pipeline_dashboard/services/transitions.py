import logging
from typing import Callable, List

from pipeline_dashboard.aws.codepipeline import CodePipelineClient, Pipeline, PipelineStage
from pipeline_dashboard.aws.codepipeline.schemas import STATUS_STOPPED
from pipeline_dashboard.services.errors import ErrorReporter, capture_exception, get_error_message
from pipeline_dashboard.services.toasts import ToastCenter, ToastStyle

log = logging.getLogger("transitions")

DISABLE_REASON = "Disabled by Raycast"
DISABLED_SUMMARY = "Stage transition disabled"


def _next_stage_name(stage: PipelineStage) -> str:
    if stage.next_stage is None:
        raise ValueError(f"stage {stage.stage_name!r} has no next stage")
    return stage.next_stage.stage_name


class StageTransitionGateway:
    def __init__(
        self,
        client: CodePipelineClient,
        toasts: ToastCenter,
        capture: ErrorReporter = capture_exception,
    ):
        self.client = client
        self.toasts = toasts
        self.capture = capture

    def enable(self, pipeline_name: str, stage: PipelineStage) -> bool:
        nxt = _next_stage_name(stage)
        toast = self.toasts.show(
            ToastStyle.ANIMATED, "❗Enabling transition", f"between {stage.stage_name} -> {nxt}"
        )
        try:
            self.client.enable_stage_transition(pipeline_name, nxt)
        except Exception as err:
            self.capture(err)
            self.toasts.update(
                toast,
                style=ToastStyle.FAILURE,
                title="❌ Failed to enable transition",
                message=get_error_message(err),
            )
            raise
        self.toasts.update(toast, style=ToastStyle.SUCCESS, title="✅ Enabled transition")
        log.info("enabled inbound transition %s/%s", pipeline_name, nxt)
        return True

    def disable(self, pipeline_name: str, stage: PipelineStage) -> bool:
        nxt = _next_stage_name(stage)
        toast = self.toasts.show(
            ToastStyle.ANIMATED, "❗Disabling transition", f"between {stage.stage_name} -> {nxt}"
        )
        try:
            self.client.disable_stage_transition(pipeline_name, nxt, DISABLE_REASON)
        except Exception as err:
            self.capture(err)
            self.toasts.update(
                toast,
                style=ToastStyle.FAILURE,
                title="❌ Failed to disable transition",
                message=get_error_message(err),
            )
            raise
        self.toasts.update(toast, style=ToastStyle.SUCCESS, title="✅ Disabled transition")
        log.info("disabled inbound transition %s/%s", pipeline_name, nxt)
        return True


def patch_pipelines(
    pipelines: List[Pipeline] | None, pipeline_name: str, transition_enabled: bool
) -> List[Pipeline] | None:
    """disable 직후 예상되는 pipeline 목록. 입력은 건드리지 않는다."""
    if pipelines is None:
        return None
    out: List[Pipeline] = []
    for p in pipelines:
        if p.name == pipeline_name and transition_enabled and p.latest_execution is not None:
            execution = p.latest_execution.model_copy(
                update={"status": STATUS_STOPPED, "status_summary": DISABLED_SUMMARY}
            )
            p = p.model_copy(update={"latest_execution": execution})
        out.append(p)
    return out


def toggle_stage_transition(
    transition_enabled: bool,
    pipeline_name: str,
    stage: PipelineStage,
    mutate: Callable[..., object],
    gateway: StageTransitionGateway,
):
    if transition_enabled:
        call = lambda: gateway.disable(pipeline_name, stage)
    else:
        call = lambda: gateway.enable(pipeline_name, stage)
    # enable 은 하류 실행 상태를 예측할 수 없으므로 재조회
    return mutate(
        call,
        optimistic_update=lambda pipelines: patch_pipelines(pipelines, pipeline_name, transition_enabled),
        should_revalidate_after=not transition_enabled,
    )
