"""Client for the external qualitative assessment service.

The service receives the note events and settings of a finished
session and returns an overall score, feedback lists and its own
version of the metrics. Its responses are untrusted: anything that
does not validate is an AssessmentError.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import BaseModel, Field, ValidationError

from ..core import NoteEvent, SessionSettings, AssessmentError

DEFAULT_TIMEOUT_S = 30.0


class AssessmentMetrics(BaseModel):
    scaleAdherence: float = Field(..., ge=0, le=100)
    timingAccuracy: float = Field(..., ge=0, le=100)
    pitchControl: float = Field(..., ge=0, le=100)
    phraseConsistency: float = Field(..., ge=0, le=100)
    styleMatch: float = Field(..., ge=0, le=100)


class AssessmentResponse(BaseModel):
    """Validated body of a successful assessment."""

    overallScore: float = Field(..., ge=0, le=100)
    feedback: List[str]
    strengths: List[str]
    weaknesses: List[str]
    suggestions: List[str]
    metrics: AssessmentMetrics


def build_payload(events: Sequence[NoteEvent], settings: SessionSettings) -> Dict[str, Any]:
    """Request body: reduced note events plus the session settings."""
    return {
        "noteEvents": [event.to_payload() for event in events],
        "style": settings.style.value,
        "key": settings.key,
        "tempo": settings.tempo,
    }


def parse_response(body: Any) -> AssessmentResponse:
    """
    Validate a response body.

    Accepts either the bare result or a `{"data": ..., "error": ...}` envelope.

    Raises:
        AssessmentError: If the service reported an error or the shape is wrong
    """
    if not isinstance(body, dict):
        raise AssessmentError(f"Unexpected response type: {type(body).__name__}")
    if body.get("error"):
        raise AssessmentError(str(body["error"]))
    data = body.get("data", body)
    try:
        return AssessmentResponse.model_validate(data)
    except ValidationError as e:
        raise AssessmentError(f"Malformed assessment response: {e}") from e


class AssessmentClient(ABC):
    """Anything that can assess a finished session."""

    @abstractmethod
    def assess(
        self,
        events: Sequence[NoteEvent],
        settings: SessionSettings,
    ) -> AssessmentResponse:
        """
        Assess a session.

        Raises:
            AssessmentError: On any failure
        """
        pass


@dataclass
class AssessmentConfig:
    """Connection settings for the HTTP assessment service.

    Attributes:
        url: Endpoint receiving the POSTed session
        api_key: Bearer token, if the service requires one
        timeout: Seconds to wait before treating the call as failed
    """

    url: str
    api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_S

    URL_ENV = "IMPROV_COACH_ASSESSMENT_URL"
    KEY_ENV = "IMPROV_COACH_ASSESSMENT_KEY"

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_TIMEOUT_S) -> Optional["AssessmentConfig"]:
        """Read the endpoint from the environment; None when not configured."""
        url = os.environ.get(cls.URL_ENV)
        if not url:
            return None
        return cls(url=url, api_key=os.environ.get(cls.KEY_ENV), timeout=timeout)


class HttpAssessmentClient(AssessmentClient):
    """POST sessions to the assessment service as JSON."""

    def __init__(self, config: AssessmentConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def assess(
        self,
        events: Sequence[NoteEvent],
        settings: SessionSettings,
    ) -> AssessmentResponse:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        try:
            response = self.session.post(
                self.config.url,
                json=build_payload(events, settings),
                headers=headers,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.Timeout as e:
            raise AssessmentError(f"Assessment timed out after {self.config.timeout}s") from e
        except requests.RequestException as e:
            raise AssessmentError(f"Assessment request failed: {e}") from e
        except ValueError as e:
            raise AssessmentError(f"Assessment response is not JSON: {e}") from e

        return parse_response(body)
