"""
Model Catalog

Maps the model keys accepted from clients to Workers AI model identifiers,
and records how each model encodes its output.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ResponseEncoding(str, Enum):
    """How a model returns its image."""
    BASE64_JSON = "base64_json"      # {"image": "<base64>"}
    BINARY_STREAM = "binary_stream"  # raw PNG bytes


@dataclass(frozen=True)
class ModelSpec:
    key: str
    model_id: str
    encoding: ResponseEncoding


FLUX_MODEL_ID = "@cf/black-forest-labs/flux-1-schnell"
DEFAULT_MODEL_KEY = "flux-1-schnell"

FLUX_NUM_STEPS = 8
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 1024

MODEL_CATALOG: Dict[str, ModelSpec] = {
    spec.key: spec
    for spec in (
        ModelSpec("dreamshaper-8-lcm", "@cf/lykon/dreamshaper-8-lcm", ResponseEncoding.BINARY_STREAM),
        ModelSpec("stable-diffusion-xl-base-1.0", "@cf/stabilityai/stable-diffusion-xl-base-1.0", ResponseEncoding.BINARY_STREAM),
        ModelSpec("stable-diffusion-xl-lightning", "@cf/bytedance/stable-diffusion-xl-lightning", ResponseEncoding.BINARY_STREAM),
        ModelSpec(DEFAULT_MODEL_KEY, FLUX_MODEL_ID, ResponseEncoding.BASE64_JSON),
    )
}

DEFAULT_MODEL = MODEL_CATALOG[DEFAULT_MODEL_KEY]

_BY_MODEL_ID: Dict[str, ModelSpec] = {spec.model_id: spec for spec in MODEL_CATALOG.values()}


def resolve_model(requested_key: Optional[str]) -> ModelSpec:
    """Map a client model key to a catalog entry. Unknown keys fall back to flux."""
    if requested_key is None:
        return DEFAULT_MODEL
    return MODEL_CATALOG.get(requested_key, DEFAULT_MODEL)


def encoding_for(model_id: str) -> ResponseEncoding:
    """Output encoding of a Workers AI model identifier."""
    spec = _BY_MODEL_ID.get(model_id)
    if spec is None:
        raise ValueError(f"Unknown model identifier: {model_id}")
    return spec.encoding


def build_inference_inputs(
    model: ModelSpec,
    prompt: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the Workers AI input object for a model.

    Flux takes a fixed step count and no size; every other model takes
    width/height, each defaulting to 1024 on its own.
    """
    inputs: Dict[str, Any] = {"prompt": prompt.strip()}

    if model.model_id != FLUX_MODEL_ID:
        inputs["width"] = width if width is not None else DEFAULT_WIDTH
        inputs["height"] = height if height is not None else DEFAULT_HEIGHT
    else:
        inputs["num_steps"] = FLUX_NUM_STEPS

    return inputs
