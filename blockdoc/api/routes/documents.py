from fastapi import APIRouter, Depends

from blockdoc.api.deps import get_block_validator, get_rules
from blockdoc.api.schemas import (
    DocumentRequest,
    ExcerptRequest,
    ExcerptResponse,
    PlainTextResponse,
    RenderRequest,
    RenderResponse,
    ValidateRequest,
    ValidateResponse,
    ValidationIssue,
)
from blockdoc.components.render_blocks import (
    ExcerptInput,
    RenderDocumentInput,
    run_excerpt,
    run_render,
)
from blockdoc.core.services.codec import decode_document, get_plain_text_content
from blockdoc.domain.blocks import BlockValidator
from blockdoc.domain.quiz import QuizProgress
from blockdoc.rules.models import Rules

router = APIRouter()


@router.post("/render", response_model=RenderResponse)
def render_document(
    request: RenderRequest,
    rules: Rules = Depends(get_rules),
) -> RenderResponse:
    """Render a persisted document to read-only HTML."""
    progress = {
        block_id: QuizProgress(answers=dict(p.answers), checked=p.checked)
        for block_id, p in request.quiz_progress.items()
    }
    result = run_render(RenderDocumentInput(content=request.content, quiz_progress=progress), rules=rules)
    return RenderResponse(html=result.html)


@router.post("/plain-text", response_model=PlainTextResponse)
def plain_text(request: DocumentRequest) -> PlainTextResponse:
    """Plain-text projection used for character counts and search."""
    text = get_plain_text_content(decode_document(request.content).blocks)
    return PlainTextResponse(text=text, characters=len(text))


@router.post("/excerpt", response_model=ExcerptResponse)
def excerpt(
    request: ExcerptRequest,
    rules: Rules = Depends(get_rules),
) -> ExcerptResponse:
    result = run_excerpt(ExcerptInput(content=request.content, max_length=request.max_length), rules=rules)
    return ExcerptResponse(excerpt=result.text)


@router.post("/validate", response_model=ValidateResponse)
def validate_document(
    request: ValidateRequest,
    rules: Rules = Depends(get_rules),
    validator: BlockValidator = Depends(get_block_validator),
) -> ValidateResponse:
    """
    Check a document before submission.

    Repairs the codec had to make are reported as warnings; limits and
    per-block problems are errors.
    """
    decoded = decode_document(request.content)
    characters = len(get_plain_text_content(decoded.blocks))
    errors = [
        ValidationIssue(code=e.code, message=e.message, block_id=e.block_id)
        for e in validator.validate(decoded.blocks)
    ]

    if decoded.used_default:
        errors.insert(0, ValidationIssue(code="unreadable_document", message=decoded.problems[0]))

    minimum = request.min_characters
    if minimum is None:
        minimum = rules.editor.min_submission_chars
    if characters < minimum:
        errors.append(
            ValidationIssue(
                code="too_short",
                message=f"Document has {characters} characters (min {minimum}).",
            )
        )

    warnings = [] if decoded.used_default else decoded.problems
    return ValidateResponse(valid=not errors, errors=errors, warnings=warnings, characters=characters)
