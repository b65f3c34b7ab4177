"""Image recognition provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

import requests
from pydantic import BaseModel, ValidationError

from logic.errors import UpstreamError
from vesture_app.config import DEFAULT_RECOGNITION_MODEL_URL

LOGGER = logging.getLogger(__name__)


class _Concept(BaseModel):
    name: str
    value: float = 0.0


class _OutputData(BaseModel):
    concepts: List[_Concept] = []


class _Output(BaseModel):
    data: _OutputData


class _RecognitionResponse(BaseModel):
    outputs: List[_Output]


@dataclass
class Concept:
    """A label recognised in an image with its confidence between 0 and 1."""

    name: str
    confidence: float


class RecognitionProvider(ABC):
    """Abstract image recognition interface."""

    @abstractmethod
    def detect_concepts(self, image_url: str) -> List[Concept]:
        """Return concepts for the image, most confident first."""


class ClarifaiRecognitionProvider(RecognitionProvider):
    """Clarifai-compatible HTTP client with response schema validation."""

    def __init__(
        self,
        api_key: str | None = None,
        model_url: str = DEFAULT_RECOGNITION_MODEL_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.model_url = model_url
        self.timeout_seconds = timeout_seconds

    def detect_concepts(self, image_url: str) -> List[Concept]:
        if not image_url:
            raise ValueError("image_url is required for recognition")
        if not self.api_key:
            raise UpstreamError("Image recognition is not configured")

        LOGGER.info("Requesting image recognition", extra={"model_url": self.model_url})
        payload = {"inputs": [{"data": {"image": {"url": image_url}}}]}
        headers = {"Authorization": f"Key {self.api_key}", "Content-Type": "application/json"}

        try:
            response = requests.post(
                self.model_url, json=payload, headers=headers, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            parsed = _RecognitionResponse.model_validate(response.json())
        except (requests.Timeout, requests.RequestException) as exc:
            LOGGER.error("Recognition API unreachable", exc_info=exc)
            raise UpstreamError("Image recognition service unavailable") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Recognition payload schema validation failed", exc_info=exc)
            raise UpstreamError("Image recognition returned an unexpected response") from exc

        if not parsed.outputs:
            return []
        concepts = [
            Concept(name=concept.name, confidence=concept.value)
            for concept in parsed.outputs[0].data.concepts
        ]
        return sorted(concepts, key=lambda concept: concept.confidence, reverse=True)


class MockRecognitionProvider(RecognitionProvider):
    """Offline deterministic provider for tests."""

    def __init__(self, concepts: Sequence[Concept] | None = None) -> None:
        self.concepts = list(
            concepts
            or [
                Concept(name="jacket", confidence=0.97),
                Concept(name="black", confidence=0.93),
                Concept(name="leather", confidence=0.88),
            ]
        )
        self.calls: List[str] = []

    def detect_concepts(self, image_url: str) -> List[Concept]:
        LOGGER.info("Returning mock concepts")
        self.calls.append(image_url)
        return list(self.concepts)


__all__ = [
    "ClarifaiRecognitionProvider",
    "Concept",
    "MockRecognitionProvider",
    "RecognitionProvider",
]
