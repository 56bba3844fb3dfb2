from typing import List, Optional
from pydantic import BaseModel, Field


class Resolution(BaseModel):
    width: Optional[int] = Field(None, description="Image width in pixels (default 1024).")
    height: Optional[int] = Field(None, description="Image height in pixels (default 1024).")


class GenerationRequest(BaseModel):
    """
    Request body for image generation.
    """
    prompt: Optional[str] = Field(None, description="A text description of the desired image.")
    model: Optional[str] = Field(None, description="Model key; unknown keys fall back to flux-1-schnell.")
    resolution: Optional[Resolution] = Field(None, description="Ignored by flux-1-schnell.")
    upload: Optional[bool] = Field(False, description="Relay the image to the image host and return its URL.")

    @property
    def clean_prompt(self) -> str:
        return (self.prompt or "").strip()


class ImageUrlResponse(BaseModel):
    imageUrl: str


class ErrorResponse(BaseModel):
    errors: List[str]
    messages: List[str] = []
