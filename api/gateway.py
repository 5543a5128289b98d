"""Job Submission Gateway.

Turns a (model id, user params) pair into a prediction request, forwards it to
the prediction service and maps every failure onto common.errors.
"""
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from common.config import WEBHOOK_HOST
from common.errors import InternalError, RemoteError, ValidationError
from common.job_schema import Job, JobRequest
from common.models import FAMILY_KLING, FAMILY_MASACTRL, MODELS, ModelTemplate

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhooks"
WEBHOOK_EVENTS = ["start", "completed"]

# Caller fields that are placed by the family rules below, never merged as-is
ROUTING_FIELDS = frozenset({"model", "prompt", "image", "start_image", "source_prompt", "target_prompt"})


def build_job_request(
    model_id: str,
    params: Mapping[str, Any],
    webhook_host: Optional[str] = None,
    models: Mapping[str, ModelTemplate] = MODELS,
) -> JobRequest:
    # Image check comes before the model lookup
    if not params.get("image") and not params.get("start_image"):
        raise ValidationError("Image is required")

    template = models.get(model_id)
    if template is None:
        raise ValidationError("Invalid model specified")

    overrides = {k: v for k, v in params.items() if k not in ROUTING_FIELDS}
    inputs: Dict[str, Any] = {**template.default_params, **overrides}

    prompt = params.get("prompt")
    if template.family == FAMILY_MASACTRL:
        inputs["image"] = params.get("image")
        inputs["source_prompt"] = params.get("source_prompt") or "a photo"
        inputs["target_prompt"] = params.get("target_prompt") or prompt or "a high quality photo"
    elif template.family == FAMILY_KLING:
        inputs["start_image"] = params.get("start_image")
        inputs["prompt"] = prompt or "Generate a video from this image"
    else:
        inputs["image"] = params.get("image")
        inputs["prompt"] = prompt or "Enhance this image with better quality and details"

    request = JobRequest(
        version=template.version,
        input={k: v for k, v in inputs.items() if v is not None},
    )
    if webhook_host:
        request.webhook = f"{webhook_host}{WEBHOOK_PATH}"
        request.webhook_events_filter = list(WEBHOOK_EVENTS)
    return request


class Gateway:
    """Submits jobs and reads their status through a prediction service client."""

    def __init__(self, client, webhook_host: Optional[str] = WEBHOOK_HOST, models: Mapping[str, ModelTemplate] = MODELS):
        self.client = client
        self.webhook_host = webhook_host
        self.models = models

    def submit(self, model_id: str, params: Mapping[str, Any]) -> Job:
        request = build_job_request(model_id, params, self.webhook_host, self.models)

        try:
            body = self.client.create_prediction(request.payload())
        except requests.RequestException:
            logger.exception(f"Error creating prediction for model {model_id}")
            raise InternalError()

        job = self._to_job(body, f"creating prediction for model {model_id}")
        logger.info(f"Submitted job {job.id} for model {model_id} ({job.status})")
        return job

    def get_job(self, job_id: str) -> Job:
        try:
            body = self.client.get_prediction(job_id)
        except requests.RequestException:
            logger.exception(f"Error reading prediction {job_id}")
            raise InternalError()

        return self._to_job(body, f"reading prediction {job_id}")

    def _to_job(self, body: Any, action: str) -> Job:
        if isinstance(body, dict) and body.get("error"):
            logger.warning(f"Prediction service reported an error while {action}: {body['error']}")
            raise RemoteError(str(body["error"]))
        try:
            return Job.model_validate(body)
        except ValueError:
            logger.exception(f"Unexpected response while {action}")
            raise InternalError()
