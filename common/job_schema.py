from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union
from enum import Enum


class JobStatus(str, Enum):
    # Vocabulary of the prediction service
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class Job(BaseModel):
    """Read-only snapshot of a remote job, as last returned by the service."""

    id: str
    status: str
    output: Optional[Union[str, List[Any]]] = None
    error: Optional[Any] = None

    # The service returns more keys (input, logs, urls, metrics, ...); keep them.
    model_config = ConfigDict(extra="allow", frozen=True)

    @property
    def output_urls(self) -> List[str]:
        if self.output is None:
            return []
        if isinstance(self.output, str):
            return [self.output]
        return [str(x) for x in self.output]

    @property
    def job_input(self) -> Dict[str, Any]:
        return (self.model_extra or {}).get("input") or {}


class JobRequest(BaseModel):
    version: str
    input: Dict[str, Any] = Field(default_factory=dict)
    webhook: Optional[str] = None
    webhook_events_filter: Optional[List[str]] = None

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PredictionRequest(BaseModel):
    """Body of POST /api/predictions. Unknown keys override template defaults."""

    model: Optional[str] = "enhance"
    prompt: Optional[str] = None
    image: Optional[str] = None
    start_image: Optional[str] = None
    source_prompt: Optional[str] = None
    target_prompt: Optional[str] = None

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    def params(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"model"}, exclude_none=True)
