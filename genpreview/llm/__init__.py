"""Generation service client."""

from .client import GenerationClient, GenerationError, GenerationRequest

__all__ = ["GenerationClient", "GenerationError", "GenerationRequest"]
