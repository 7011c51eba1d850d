from dataclasses import dataclass, field
from typing import Callable, List

from pipeline_dashboard.aws.codepipeline import Pipeline, PipelineStage
from pipeline_dashboard.services.pipeline_state import PipelineStateStore
from pipeline_dashboard.services.transitions import StageTransitionGateway, toggle_stage_transition

ICON_BOLT = "bolt"
ICON_BOLT_DISABLED = "bolt-disabled"
COLOR_GREEN = "green"
COLOR_RED = "red"


@dataclass
class MenuEntry:
    key: str
    title: str
    icon: str
    tint_color: str
    transition_enabled: bool
    stage: PipelineStage
    on_select: Callable[[], object] = field(repr=False)

    def select(self):
        return self.on_select()

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "title": self.title,
            "icon": self.icon,
            "tint_color": self.tint_color,
            "transition_enabled": self.transition_enabled,
            "stage_name": self.stage.stage_name,
            "next_stage_name": self.stage.next_stage.stage_name if self.stage.next_stage else None,
        }


def build_stage_menu(
    pipeline: Pipeline,
    stages: List[PipelineStage] | None,
    on_toggle: Callable[[bool, PipelineStage], object],
) -> List[MenuEntry]:
    entries: List[MenuEntry] = []
    for s in stages or []:
        if s.next_stage is None:
            continue
        enabled = s.next_stage.inbound_enabled
        entries.append(
            MenuEntry(
                key=f"{pipeline.name}-{s.stage_name}-{s.next_stage.stage_name}",
                title=f"{s.stage_name} -> {s.next_stage.stage_name}",
                icon=ICON_BOLT if enabled else ICON_BOLT_DISABLED,
                tint_color=COLOR_GREEN if enabled else COLOR_RED,
                transition_enabled=enabled,
                stage=s,
                on_select=lambda enabled=enabled, s=s: on_toggle(enabled, s),
            )
        )
    return entries


class ToggleStageTransitionAction:
    title = "Toggle Stage Transition"
    icon = ICON_BOLT
    shortcut = "ctrl+t"
    filtering = True

    def __init__(
        self,
        pipeline: Pipeline,
        state_store: PipelineStateStore,
        mutate: Callable[..., object],
        visit: Callable[[Pipeline], None],
        gateway: StageTransitionGateway,
    ):
        self.pipeline = pipeline
        self.state = state_store.use(pipeline.name)
        self.mutate = mutate
        self.visit = visit
        self.gateway = gateway

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def open(self) -> List[MenuEntry]:
        self.state.revalidate()
        return self.entries()

    def _toggle(self, transition_enabled: bool, stage: PipelineStage):
        self.visit(self.pipeline)
        result = toggle_stage_transition(
            transition_enabled, self.pipeline.name, stage, self.mutate, self.gateway
        )
        # 다음 선택이 바뀐 transition 상태를 보도록 stage 목록 재조회
        self.state.revalidate()
        return result

    def entries(self) -> List[MenuEntry]:
        return build_stage_menu(self.pipeline, self.state.stages, self._toggle)

    def find(self, stage_name: str) -> MenuEntry | None:
        for e in self.entries():
            if e.stage.stage_name == stage_name:
                return e
        return None
