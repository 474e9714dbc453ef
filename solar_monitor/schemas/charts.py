from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

ChartValue = Union[int, float, None]


class ChartDataset(BaseModel):
    label: Optional[str] = None
    data: List[ChartValue] = []
    background_color: Optional[Union[str, List[str]]] = None
    border_color: Optional[str] = None
    # Top-to-bottom colour stops, painted by the browser as a canvas gradient
    gradient: Optional[List[str]] = None
    # Any other Chart.js dataset property, passed through as-is
    style: Dict[str, Any] = {}

    def to_chartjs(self) -> Dict[str, Any]:
        dataset: Dict[str, Any] = {"data": list(self.data)}
        if self.label is not None:
            dataset["label"] = self.label
        if self.background_color is not None:
            dataset["backgroundColor"] = self.background_color
        if self.border_color is not None:
            dataset["borderColor"] = self.border_color
        if self.gradient:
            dataset["gradient"] = list(self.gradient)
        dataset.update(self.style)
        return dataset


class ChartSpec(BaseModel):
    key: str
    type: str  # bar | line | doughnut
    labels: List[str] = []
    datasets: List[ChartDataset] = []
    options: Dict[str, Any] = {}
    center_text: Optional[str] = None
    revision: int = 0

    def to_chartjs(self) -> Dict[str, Any]:
        """Chart.js constructor config; the centre text rides in the plugin options"""
        options = dict(self.options)
        plugins = dict(options.get("plugins", {}))
        if self.center_text is not None:
            plugins["centerText"] = {"text": self.center_text}
        options["plugins"] = plugins
        return {
            "type": self.type,
            "data": {
                "labels": list(self.labels),
                "datasets": [dataset.to_chartjs() for dataset in self.datasets],
            },
            "options": options,
        }


class ChartPayload(BaseModel):
    key: str
    revision: int
    config: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_spec(cls, spec: ChartSpec) -> "ChartPayload":
        return cls(key=spec.key, revision=spec.revision, config=spec.to_chartjs())
