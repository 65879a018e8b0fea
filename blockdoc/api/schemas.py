from typing import Any

from pydantic import BaseModel, Field


# --- Reader state ---
class QuizProgressModel(BaseModel):
    answers: dict[str, str] = {}
    checked: bool = False


# --- Documents ---
class DocumentRequest(BaseModel):
    content: str


class RenderRequest(DocumentRequest):
    quiz_progress: dict[str, QuizProgressModel] = {}  # keyed by quiz block id


class RenderResponse(BaseModel):
    html: str


class PlainTextResponse(BaseModel):
    text: str
    characters: int


class ExcerptRequest(DocumentRequest):
    max_length: int = Field(default=160, ge=1)


class ExcerptResponse(BaseModel):
    excerpt: str


class ValidateRequest(DocumentRequest):
    min_characters: int | None = Field(default=None, ge=0)


class ValidationIssue(BaseModel):
    code: str
    message: str
    block_id: str | None = None


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[ValidationIssue] = []
    warnings: list[str] = []
    characters: int


# --- Drafts ---
class DraftRequest(BaseModel):
    content: str


class DraftResponse(BaseModel):
    content: str
    blocks: list[dict[str, Any]]
