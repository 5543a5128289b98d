import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from api.gateway import Gateway
from api.uploads import build_form_params, image_to_data_uri
from common.config import LOG_LEVEL, POLL_INTERVAL, require_api_token
from common.errors import GatewayError
from common.job_schema import PredictionRequest
from common.logging_config import setup_logging
from common.models import DEFAULT_MODEL, available_models
from common.polling import state_for_status
from common.replicate_client import ReplicateClient

logger = logging.getLogger(__name__)

VIDEO_SUFFIXES = (".mp4", ".webm", ".mov")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    # Missing credential is fatal at startup, not on the first request
    require_api_token()
    logger.info("Gateway started")
    yield


app = FastAPI(title="Image AI Gateway", lifespan=lifespan)
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@lru_cache()
def get_gateway() -> Gateway:
    return Gateway(ReplicateClient(require_api_token()))


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Same contract as GatewayError: 400 with a single message
    errors = exc.errors()
    loc = []
    if errors and errors[0].get("type") != "json_invalid":
        loc = [str(part) for part in errors[0].get("loc", ())[1:]]
    detail = f"Invalid value for {'.'.join(loc)}" if loc else "Invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def is_video(url: str) -> bool:
    return url.lower().split("?", 1)[0].endswith(VIDEO_SUFFIXES)


# ---------- API endpoints ----------

@app.get("/api/models")
def list_models():
    return available_models()


@app.post("/api/predictions", status_code=status.HTTP_201_CREATED)
def create_prediction(req: PredictionRequest, gateway: Gateway = Depends(get_gateway)):
    job = gateway.submit(req.model, req.params())
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=job.model_dump())


@app.get("/api/predictions/{prediction_id}")
def read_prediction(prediction_id: str, gateway: Gateway = Depends(get_gateway)):
    job = gateway.get_job(prediction_id)
    return job.model_dump()


@app.post("/api/webhooks")
async def prediction_webhook(request: Request):
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid webhook body")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Invalid webhook body")

    # Informational only, the polling loop never waits on these
    logger.info(f"Webhook for job {body.get('id')}: {body.get('status')}")
    return {"received": True}


# ---------- Web UI endpoints ----------

def _render(request: Request, status_code: int = 200, **context):
    base = {
        "models": available_models(),
        "selected_model": DEFAULT_MODEL,
        "job": None,
        "job_id": None,
        "error": None,
        "pending": False,
        "is_video": is_video,
        "poll_interval_ms": int(POLL_INTERVAL * 1000),
    }
    base.update(context)
    return templates.TemplateResponse(request, "index.html", base, status_code=status_code)


@app.get("/", response_class=HTMLResponse)
def home(request: Request, job_id: Optional[str] = None, gateway: Gateway = Depends(get_gateway)):
    if not job_id:
        return _render(request)

    try:
        job = gateway.get_job(job_id)
    except GatewayError as e:
        return _render(request, job_id=job_id, error=e.message)

    return _render(
        request,
        job=job,
        job_id=job_id,
        pending=not state_for_status(job.status).is_terminal,
    )


@app.post("/upload", response_class=HTMLResponse)
async def upload_image(
    request: Request,
    file: UploadFile = File(...),
    model: str = Form(DEFAULT_MODEL),
    prompt: str = Form(""),
    gateway: Gateway = Depends(get_gateway),
):
    content = await file.read()

    try:
        data_uri = image_to_data_uri(content)
        job = await run_in_threadpool(gateway.submit, model, build_form_params(model, prompt, data_uri))
    except GatewayError as e:
        return _render(request, status_code=e.status_code, selected_model=model, error=e.message)

    return RedirectResponse(url=f"/?job_id={job.id}", status_code=303)
