from .generation import GenerationRequest, Resolution, ImageUrlResponse, ErrorResponse

__all__ = ["GenerationRequest", "Resolution", "ImageUrlResponse", "ErrorResponse"]
