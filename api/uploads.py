import base64
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from common.errors import ValidationError
from common.models import FAMILY_KLING, FAMILY_MASACTRL, get_template


def image_to_data_uri(content: bytes) -> str:
    """Verify `content` is an image Pillow can read and encode it as a data URI."""
    if not content:
        raise ValidationError("Image is required")
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
            mime = Image.MIME.get(img.format, "application/octet-stream")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError):
        raise ValidationError("Uploaded file is not a supported image")

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def build_form_params(model_id: str, prompt: str, data_uri: str) -> dict:
    """Request body the upload form sends for `model_id`."""
    template = get_template(model_id)
    family = template.family if template else None
    params = {"prompt": prompt}
    if family == FAMILY_MASACTRL:
        params["source_prompt"] = "a photo"
        params["target_prompt"] = prompt or "a high quality photo"
        params["image"] = data_uri
    elif family == FAMILY_KLING:
        params["start_image"] = data_uri
    else:
        params["image"] = data_uri
    return params
