import time
from typing import Any, Literal, get_args
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# --- Enums / Literals ---
BlockType = Literal[
    "text",
    "heading1",
    "heading2",
    "heading3",
    "image",
    "video",
    "code",
    "divider",
    "quote",
    "quiz",
    "table",
]
TextAlignment = Literal["left", "center", "right", "justify"]
ListType = Literal["none", "bullet", "numbered", "checklist"]
ImageSize = Literal["small", "medium", "large", "full"]
BorderRadius = Literal["none", "small", "medium", "large", "full"]
VideoPlatform = Literal["youtube", "vimeo", "loom", "other"]
AspectRatio = Literal["16:9", "4:3", "1:1"]
CodeTheme = Literal["light", "dark"]
QuestionType = Literal["multiple-choice", "true-false", "short-answer"]
BorderStyle = Literal["none", "solid", "dashed"]

BLOCK_TYPES: tuple[BlockType, ...] = get_args(BlockType)

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "javascript", "typescript", "python", "java", "csharp", "cpp", "c",
    "ruby", "go", "rust", "swift", "kotlin", "php", "sql", "html", "css",
    "json", "yaml", "markdown", "bash", "shell", "powershell", "dockerfile",
)


def now_ms() -> int:
    return int(time.time() * 1000)


class WireModel(BaseModel):
    """Base for everything persisted in a document: camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# --- Metadata shapes ---

class TextMetadata(WireModel):
    alignment: TextAlignment | None = None
    list_type: ListType | None = None
    checked: bool | None = None  # checklist state

class ImageMetadata(WireModel):
    src: str
    alt: str | None = None
    caption: str | None = None
    size: ImageSize | None = None
    alignment: TextAlignment | None = None
    border_radius: BorderRadius | None = None
    width: int | float | None = None
    height: int | float | None = None

class VideoMetadata(WireModel):
    url: str
    platform: VideoPlatform | None = None
    aspect_ratio: AspectRatio | None = None
    autoplay: bool | None = None
    start_time: int | float | None = None
    end_time: int | float | None = None

class CodeMetadata(WireModel):
    language: str
    filename: str | None = None
    show_line_numbers: bool | None = None
    theme: CodeTheme | None = None

class QuizOption(WireModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    text: str = ""
    is_correct: bool = False

class QuizQuestion(WireModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    question: str = ""
    type: QuestionType = "multiple-choice"
    options: list[QuizOption] | None = None
    correct_answer: str | None = None
    explanation: str | None = None
    points: int | None = None

class QuizMetadata(WireModel):
    questions: list[QuizQuestion] = Field(default_factory=list)
    show_results: bool | None = None
    randomize_options: bool | None = None

class TableCell(WireModel):
    content: str = ""
    row_span: int | None = None
    col_span: int | None = None
    background_color: str | None = None
    alignment: TextAlignment | None = None

class TableMetadata(WireModel):
    rows: list[list[TableCell]]
    has_header: bool | None = None
    alternating_colors: bool | None = None
    border_style: BorderStyle | None = None


BlockMetadata = (
    TextMetadata
    | ImageMetadata
    | VideoMetadata
    | CodeMetadata
    | QuizMetadata
    | TableMetadata
)

# Every block type must appear here; None means the type carries no metadata.
METADATA_MODELS: dict[BlockType, type[WireModel] | None] = {
    "text": TextMetadata,
    "heading1": None,
    "heading2": None,
    "heading3": None,
    "image": ImageMetadata,
    "video": VideoMetadata,
    "code": CodeMetadata,
    "divider": None,
    "quote": None,
    "quiz": QuizMetadata,
    "table": TableMetadata,
}


def metadata_matches(block_type: BlockType, metadata: Any) -> bool:
    """True if `metadata` is a legal payload for a block of `block_type`."""
    if metadata is None:
        return True
    expected = METADATA_MODELS.get(block_type)
    return expected is not None and type(metadata) is expected


# --- Content ---

class ContentBlock(WireModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    type: BlockType
    content: str = ""
    metadata: BlockMetadata | None = None
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)

    @model_validator(mode="before")
    @classmethod
    def _resolve_metadata(cls, data: Any) -> Any:
        # The metadata payload carries no tag of its own; the block type picks the shape.
        if not isinstance(data, dict):
            return data
        raw = data.get("metadata")
        block_type = data.get("type")
        if raw is None or block_type not in METADATA_MODELS:
            return data
        model = METADATA_MODELS[block_type]
        if model is None:
            return {**data, "metadata": None}
        if isinstance(raw, dict):
            return {**data, "metadata": model.model_validate(raw)}
        return data

    @model_validator(mode="after")
    def _check_metadata_shape(self) -> "ContentBlock":
        if not metadata_matches(self.type, self.metadata):
            raise ValueError(
                f"Metadata {type(self.metadata).__name__} is not valid for block type '{self.type}'"
            )
        return self

    def to_wire(self) -> dict[str, Any]:
        """Plain JSON-ready dict; unset optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
