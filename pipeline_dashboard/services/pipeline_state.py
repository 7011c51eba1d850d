import threading
from dataclasses import dataclass
from typing import Callable, Dict, List

from pipeline_dashboard.aws.codepipeline import CodePipelineClient, PipelineStage
from pipeline_dashboard.services.cache import CachedValue


@dataclass
class PipelineState:
    pipeline_name: str
    _cache: CachedValue[List[PipelineStage]]

    @property
    def stages(self) -> List[PipelineStage] | None:
        return self._cache.data

    @property
    def is_loading(self) -> bool:
        return self._cache.is_loading

    def revalidate(self) -> List[PipelineStage] | None:
        return self._cache.revalidate()


class PipelineStateStore:
    """pipeline 이름별 stage 목록 캐시."""

    def __init__(self, client: CodePipelineClient):
        self.client = client
        self._states: Dict[str, CachedValue[List[PipelineStage]]] = {}
        self._lock = threading.Lock()

    def _fetcher(self, pipeline_name: str) -> Callable[[], List[PipelineStage]]:
        return lambda: self.client.get_pipeline_state(pipeline_name)

    def use(self, pipeline_name: str) -> PipelineState:
        with self._lock:
            cache = self._states.get(pipeline_name)
            if cache is None:
                cache = CachedValue(self._fetcher(pipeline_name), name=f"state:{pipeline_name}")
                self._states[pipeline_name] = cache
        return PipelineState(pipeline_name, cache)
