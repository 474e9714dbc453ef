from typing import Callable, Dict, List, Optional, Sequence

from solar_monitor.schemas.charts import ChartPayload, ChartSpec, ChartValue
from solar_monitor.utils.logger import get_logger

logger = get_logger("app.charts")

LIVE_STATUS_SCREEN = "live-status"
REPORTS_SCREEN = "reports"


class ChartRegistry:
    """
    Chart instances owned by one dashboard screen, keyed by canvas.

    ``create_or_update`` keeps an existing instance and swaps its data in
    place; only a missing instance is built from scratch. Each in-place
    change bumps ``revision`` so the browser knows to call ``chart.update()``.
    """

    def __init__(self, screen: str):
        self.screen = screen
        self._charts: Dict[str, ChartSpec] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._charts

    def __len__(self) -> int:
        return len(self._charts)

    def get(self, key: str) -> Optional[ChartSpec]:
        return self._charts.get(key)

    def create_or_update(
        self,
        key: str,
        builder: Callable[[], ChartSpec],
        values: Sequence[ChartValue],
        center_text: Optional[str] = None,
    ) -> ChartSpec:
        chart = self._charts.get(key)
        if chart is not None:
            chart.datasets[0].data = list(values)
            if center_text is not None:
                chart.center_text = center_text
            chart.revision += 1
            logger.debug(f"Updated chart {self.screen}/{key} in place (rev {chart.revision})")
            return chart

        chart = builder()
        chart.key = key
        chart.datasets[0].data = list(values)
        chart.center_text = center_text
        self._charts[key] = chart
        logger.debug(f"Created chart {self.screen}/{key}")
        return chart

    def destroy(self, key: str) -> bool:
        return self._charts.pop(key, None) is not None

    def destroy_all(self) -> None:
        self._charts.clear()

    def specs(self) -> List[ChartSpec]:
        return list(self._charts.values())

    def payloads(self) -> List[ChartPayload]:
        return [ChartPayload.from_spec(spec) for spec in self._charts.values()]


class ChartRegistries:
    """One registry per screen, created on first use"""

    def __init__(self):
        self._registries: Dict[str, ChartRegistry] = {}

    def for_screen(self, screen: str) -> ChartRegistry:
        registry = self._registries.get(screen)
        if registry is None:
            registry = self._registries[screen] = ChartRegistry(screen)
        return registry
