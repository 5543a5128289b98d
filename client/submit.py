"""Submit an image to the gateway and follow the job until it finishes.

    python -m client.submit photo.png --model kling --prompt "slow zoom in"
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

import requests

from api.uploads import build_form_params, image_to_data_uri
from common.config import GATEWAY_URL, LOG_LEVEL, POLL_INTERVAL
from common.errors import GatewayError, TransportError
from common.job_schema import Job
from common.logging_config import setup_logging
from common.models import DEFAULT_MODEL, MODELS
from common.polling import PollState, track

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_JOB_FAILED = 1
EXIT_REJECTED = 2

REQUEST_TIMEOUT = 30  # seconds


class GatewayClient:
    """HTTP client for this project's own /api/predictions endpoints."""

    def __init__(self, base_url: str = GATEWAY_URL, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def submit(self, model_id: str, params: dict) -> Job:
        resp = self.session.post(
            f"{self.base_url}/api/predictions",
            json={"model": model_id, **params},
            timeout=REQUEST_TIMEOUT,
        )
        body = resp.json()
        if resp.status_code != 201:
            detail = body.get("detail") if isinstance(body, dict) else None
            raise GatewayError(detail or f"Submission failed ({resp.status_code})")
        try:
            return Job.model_validate(body)
        except ValueError:
            raise GatewayError("Unexpected response from gateway")

    async def fetch_status(self, job_id: str):
        try:
            resp = await asyncio.to_thread(
                self.session.get, f"{self.base_url}/api/predictions/{job_id}", timeout=REQUEST_TIMEOUT
            )
            return resp.status_code, resp.json()
        except (requests.RequestException, ValueError) as e:
            raise TransportError(str(e))


def print_update(job: Job):
    print(f"{job.id}: {job.status}")


async def run(image_path: Path, model_id: str, prompt: str, client: GatewayClient, interval: float = POLL_INTERVAL) -> int:
    try:
        data_uri = image_to_data_uri(image_path.read_bytes())
        job = await asyncio.to_thread(client.submit, model_id, build_form_params(model_id, prompt, data_uri))
    except GatewayError as e:
        logger.error(f"Submission rejected: {e.message}")
        return EXIT_REJECTED
    except requests.RequestException as e:
        logger.error(f"Could not reach gateway at {client.base_url}: {e}")
        return EXIT_REJECTED

    result = await track(job, client.fetch_status, on_update=print_update, interval=interval)

    if result.state is PollState.SUCCEEDED:
        for url in result.job.output_urls:
            print(url)
        return EXIT_OK
    if result.state is PollState.TRANSPORT_ERROR:
        logger.error(f"Lost track of job {result.job.id}: {result.detail}")
    else:
        logger.error(f"Job {result.job.id} failed: {result.job.error}")
    return EXIT_JOB_FAILED


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Submit an image to a hosted AI model and wait for the result.")
    parser.add_argument("image", type=Path, help="Image file to upload")
    parser.add_argument("--model", default=DEFAULT_MODEL, choices=sorted(MODELS), help="Model to run")
    parser.add_argument("--prompt", default="", help="Prompt text")
    parser.add_argument("--gateway", default=GATEWAY_URL, help="Base URL of the gateway")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    setup_logging(LOG_LEVEL)
    args = parse_args(argv)
    if not args.image.is_file():
        logger.error(f"No such file: {args.image}")
        return EXIT_REJECTED
    return asyncio.run(run(args.image, args.model, args.prompt, GatewayClient(args.gateway)))


if __name__ == "__main__":
    sys.exit(main())
