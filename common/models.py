"""Registry of the hosted models the gateway can submit jobs to.

Built once at import time and never modified afterwards.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Composition rule selected per model, see api.gateway.build_job_request
FAMILY_GENERIC = "generic"
FAMILY_MASACTRL = "masactrl"
FAMILY_KLING = "kling"

DEFAULT_MODEL = "enhance"


@dataclass(frozen=True)
class ModelTemplate:
    version: str
    default_params: Mapping[str, Any] = field(default_factory=dict)
    label: str = ""
    family: str = FAMILY_GENERIC

    def __post_init__(self):
        object.__setattr__(self, "default_params", MappingProxyType(dict(self.default_params)))


MODELS: Mapping[str, ModelTemplate] = MappingProxyType({
    # Stability AI SDXL
    "enhance": ModelTemplate(
        version="8beff3369e81422112d93b89ca01426147de542cd4684c244b673b105188fe5f",
        default_params={
            "image_strength": 0.35,
            "guidance_scale": 7.5,
            "num_inference_steps": 25,
            "negative_prompt": "blur, pixelated, low quality, distorted",
        },
        label="Stability AI SDXL (Best Overall)",
    ),
    # OpenJourney v4
    "openjourney": ModelTemplate(
        version="9ca13f02927c5ef346f29e6917114de0d5a2c4b12c14ce674b73ed9609bd0f4d",
        default_params={
            "prompt_strength": 0.8,
            "num_inference_steps": 30,
            "guidance_scale": 7.5,
            "negative_prompt": "blur, pixelated, low quality, distorted",
        },
        label="OpenJourney v4 (Artistic Enhancement)",
    ),
    # DeepFloyd IF
    "deepfloyd": ModelTemplate(
        version="2b017d9b67edd2ee1401238df49d75da53c523f36e363881e057f5dc3ed3c5b2",
        default_params={
            "num_inference_steps": 50,
            "guidance_scale": 7.5,
            "negative_prompt": "low quality, bad quality, blurry",
        },
        label="DeepFloyd IF (High Detail)",
    ),
    # MasaCtrl on Stable Diffusion v1.4
    "masactrl": ModelTemplate(
        version="4e86d80ab64a8395e7fd327d34fe85d240a3d9e8706b7144864ba981eba3dfa6",
        default_params={
            "source_prompt": "a photo",
            "target_prompt": "a photo",
            "guidance_scale": 7.5,
            "num_inference_steps": 30,
            "seed": -1,  # random
        },
        label="MasaCtrl (Best for Consistent Edits)",
        family=FAMILY_MASACTRL,
    ),
    # Kling v1.6, video generation. Addressed by model name, not version hash.
    "kling": ModelTemplate(
        version="kwaivgi/kling-v1.6-standard",
        default_params={
            "prompt": "",
            "duration": 5,
            "cfg_scale": 0.5,
            "start_image": "a photo",
            "negative_prompt": "low quality, bad quality, blurry",
        },
        label="Kling v1.6 (Video Generation)",
        family=FAMILY_KLING,
    ),
})


def get_template(model_id: str) -> Optional[ModelTemplate]:
    return MODELS.get(model_id)


def available_models():
    return [{"id": model_id, "label": t.label} for model_id, t in MODELS.items()]
