from fastapi import APIRouter, Depends, HTTPException, Response, status

from blockdoc.adapters.sqlite.drafts import SQLiteDraftStore, draft_key
from blockdoc.api.deps import get_block_validator, get_draft_store
from blockdoc.api.schemas import DraftRequest, DraftResponse
from blockdoc.core.services.codec import blocks_to_json, decode_document
from blockdoc.domain.blocks import BlockValidator

router = APIRouter()


@router.get("/{user_id}/{section_id}", response_model=DraftResponse)
def get_draft(
    user_id: str,
    section_id: str,
    store: SQLiteDraftStore = Depends(get_draft_store),
) -> DraftResponse:
    """Fetch a saved draft with its decoded blocks."""
    content = store.load(draft_key(user_id, section_id))
    if content is None:
        raise HTTPException(status_code=404, detail="Draft not found")

    blocks = decode_document(content).blocks
    return DraftResponse(content=content, blocks=[b.to_wire() for b in blocks])


@router.put("/{user_id}/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def save_draft(
    user_id: str,
    section_id: str,
    request: DraftRequest,
    store: SQLiteDraftStore = Depends(get_draft_store),
    validator: BlockValidator = Depends(get_block_validator),
) -> Response:
    """Store a draft. The body is normalized through the codec before saving."""
    decoded = decode_document(request.content)
    if decoded.used_default:
        raise HTTPException(status_code=422, detail=decoded.problems[0])

    errors = validator.validate(decoded.blocks)
    if errors:
        raise HTTPException(
            status_code=422,
            detail=[{"code": e.code, "message": e.message, "block_id": e.block_id} for e in errors],
        )

    store.save(draft_key(user_id, section_id), blocks_to_json(decoded.blocks))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_draft(
    user_id: str,
    section_id: str,
    store: SQLiteDraftStore = Depends(get_draft_store),
) -> Response:
    store.delete(draft_key(user_id, section_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
