"""
Quiz Generation Handoff

Builds the request body for the quiz service's generate-from-text
endpoint from a confirmed SelectionOutput and posts it as JSON.

Usage:
    request = QuizGenerationRequest.from_selection(output, source_file="skript.pdf")
    job = QuizGenerationClient(base_url).submit(request)
    print(job.get("jobId"))
"""

import json
import logging
from typing import Any, Literal, Optional
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError

from pydantic import BaseModel, Field

from .models import SelectionOutput

logger = logging.getLogger(__name__)

GENERATE_FROM_TEXT_PATH = "/v1/quizzes/generate-from-text"
MAX_TEXT_LENGTH = 300_000

QuestionType = Literal[
    "MCQ_SINGLE",
    "MCQ_MULTI",
    "OPEN",
    "FILL_GAP",
    "COMPLIANCE",
    "TRUE_FALSE",
    "ORDERING",
    "HOTSPOT",
]
Difficulty = Literal["EASY", "MEDIUM", "HARD"]

DEFAULT_QUESTIONS_PER_TYPE: dict[str, int] = {"MCQ_SINGLE": 3, "TRUE_FALSE": 2}


def post_json(
    url: str,
    payload: dict,
    timeout: int = 120,
    headers: Optional[dict[str, str]] = None,
) -> dict[str, Any]:
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    req = urllib_request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", **(headers or {})},
        method="POST",
    )
    try:
        with urllib_request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
            return json.loads(raw) if raw else {}
    except HTTPError as exc:
        body = exc.read().decode("utf-8") if exc.fp else ""
        raise RuntimeError(f"HTTP {exc.code} calling {url}: {body}") from exc
    except URLError as exc:
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc


class QuizGenerationRequest(BaseModel):
    """
    Request body for generating a quiz from selected page text.
    """
    text: str = Field(
        ...,
        description="Plain text of the selected pages",
        min_length=1,
        max_length=MAX_TEXT_LENGTH,
    )
    questions_per_type: dict[QuestionType, int] = Field(
        default_factory=lambda: dict(DEFAULT_QUESTIONS_PER_TYPE),
        description="Number of questions per question type",
    )
    difficulty: Difficulty = Field(
        "MEDIUM",
        description="Question difficulty",
    )
    language: Optional[str] = Field(
        None,
        description="Language code, e.g. 'en' or 'de'",
    )
    quiz_title: Optional[str] = Field(
        None,
        description="Custom quiz title",
        max_length=100,
    )
    source_file: str = Field(
        "",
        description="File the text was taken from",
    )
    selected_pages: list[int] = Field(
        default_factory=list,
        description="Page numbers the text was taken from",
    )

    @classmethod
    def from_selection(
        cls,
        output: SelectionOutput,
        source_file: str = "",
        **options: Any,
    ) -> "QuizGenerationRequest":
        return cls(
            text=output.selected_content,
            source_file=source_file,
            selected_pages=list(output.selected_page_numbers),
            **options,
        )

    def to_payload(self) -> dict[str, Any]:
        """Request body in the quiz service's field naming."""
        payload: dict[str, Any] = {
            "text": self.text,
            "questionsPerType": dict(self.questions_per_type),
            "difficulty": self.difficulty,
        }
        if self.language:
            payload["language"] = self.language
        if self.quiz_title:
            payload["quizTitle"] = self.quiz_title
        return payload


class QuizGenerationClient:
    def __init__(
        self,
        base_url: str,
        timeout: int = 120,
        api_token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.api_token = api_token

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{GENERATE_FROM_TEXT_PATH}"

    def submit(self, request: QuizGenerationRequest) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_token}"} if self.api_token else None
        logger.info(
            f"Submitting {len(request.text)} characters from "
            f"{len(request.selected_pages)} page(s) of {request.source_file or '<unnamed>'}"
        )
        return post_json(self.endpoint, request.to_payload(), timeout=self.timeout, headers=headers)
