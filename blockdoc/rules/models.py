from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from blockdoc.core.services.richtext import DEFAULT_CONFIG
from blockdoc.domain.entities import SUPPORTED_LANGUAGES


class EditorRules(BaseModel):
    autosave_debounce_seconds: float = Field(default=2.0, ge=0)
    min_autosave_chars: int = Field(default=10, ge=0)
    min_submission_chars: int = Field(default=50, ge=0)
    max_blocks: int = Field(default=500, ge=1)
    max_json_bytes: int = Field(default=2_000_000, ge=1)
    indent: str = "  "

class CodeRules(BaseModel):
    default_language: str = "javascript"
    supported_languages: list[str] = Field(default_factory=lambda: list(SUPPORTED_LANGUAGES))

    @model_validator(mode="after")
    def _default_is_supported(self) -> "CodeRules":
        if self.default_language not in self.supported_languages:
            raise ValueError(
                f"default_language '{self.default_language}' is not in supported_languages"
            )
        return self

class QuizRules(BaseModel):
    min_options: int = Field(default=2, ge=1)
    max_options: int = Field(default=8, ge=1)

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "QuizRules":
        if self.min_options > self.max_options:
            raise ValueError("min_options must not exceed max_options")
        return self

class RichTextRules(BaseModel):
    allow_tags: list[str] = Field(default_factory=lambda: sorted(DEFAULT_CONFIG.allow_tags))
    allow_attrs: dict[str, list[str]] = Field(
        default_factory=lambda: {
            tag: sorted(attrs) for tag, attrs in DEFAULT_CONFIG.allow_attrs.items()
        }
    )
    forbid_protocols: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_CONFIG.forbid_protocols)
    )
    add_noopener: bool = True
    add_noreferrer: bool = True

    @field_validator("forbid_protocols")
    @classmethod
    def _protocols_end_with_colon(cls, value: list[str]) -> list[str]:
        return [p.lower() if p.endswith(":") else f"{p.lower()}:" for p in value]

class RenderRules(BaseModel):
    image_loading: Literal["lazy", "eager"] = "lazy"
    code_block_class: str = "code-block"

class Rules(BaseModel):
    editor: EditorRules = Field(default_factory=EditorRules)
    code: CodeRules = Field(default_factory=CodeRules)
    quiz: QuizRules = Field(default_factory=QuizRules)
    richtext: RichTextRules = Field(default_factory=RichTextRules)
    render: RenderRules = Field(default_factory=RenderRules)
