from fastapi import APIRouter, Depends, Query, Request, Response, status

from careerpilot.ai.completion_client import CompletionClient, CompletionError
from careerpilot.api.deps import get_completion_client, get_document_store, get_usage_tracker, raise_http_error
from careerpilot.core.rate_limit import rate_limit
from careerpilot.core.security import current_user_id
from careerpilot.schemas.documents import (
    CoverLetterCreateRequest,
    CoverLetterListResponse,
    CoverLetterRegenerateRequest,
    CoverLetterResponse,
    CoverLetterResult,
    CoverLetterUpdateRequest,
)
from careerpilot.services import cover_letter_service
from careerpilot.services.usage_tracker import UsageLimitExceeded, UsageTracker
from careerpilot.storage.document_store import DocumentNotFoundError, DocumentStore

router = APIRouter()


@router.post("/cover-letters", response_model=CoverLetterResult, status_code=status.HTTP_201_CREATED)
@rate_limit()
def create_cover_letter(
    request: Request,
    payload: CoverLetterCreateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
    usage: UsageTracker = Depends(get_usage_tracker),
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    try:
        return cover_letter_service.generate_cover_letter(
            store=store,
            usage=usage,
            client=client,
            user_id=user_id,
            job_id=payload.job_id,
            resume_id=payload.resume_id,
            tone=payload.tone,
            candidate={
                "name": payload.candidate_name,
                "email": payload.candidate_email,
                "visa_status": payload.visa_status,
            },
        )
    except (DocumentNotFoundError, UsageLimitExceeded, CompletionError) as exc:
        raise_http_error(exc)


@router.get("/cover-letters", response_model=CoverLetterListResponse)
def list_cover_letters(
    limit: int = Query(default=10, ge=1, le=100),
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    return CoverLetterListResponse(items=cover_letter_service.get_cover_letter_history(store, user_id, limit=limit))


@router.get("/cover-letters/{cover_letter_id}", response_model=CoverLetterResponse)
def get_cover_letter(
    cover_letter_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return cover_letter_service.get_cover_letter(store, user_id, cover_letter_id)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)


@router.put("/cover-letters/{cover_letter_id}", response_model=CoverLetterResponse)
def update_cover_letter(
    cover_letter_id: str,
    payload: CoverLetterUpdateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return cover_letter_service.update_cover_letter(store, user_id, cover_letter_id, payload.content)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)


@router.delete("/cover-letters/{cover_letter_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cover_letter(
    cover_letter_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        cover_letter_service.delete_cover_letter(store, user_id, cover_letter_id)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/cover-letters/{cover_letter_id}/regenerate", response_model=CoverLetterResult)
@rate_limit()
def regenerate_cover_letter(
    request: Request,
    cover_letter_id: str,
    payload: CoverLetterRegenerateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
    usage: UsageTracker = Depends(get_usage_tracker),
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    try:
        return cover_letter_service.regenerate_with_tone(
            store=store,
            usage=usage,
            client=client,
            user_id=user_id,
            cover_letter_id=cover_letter_id,
            tone=payload.tone,
        )
    except (DocumentNotFoundError, UsageLimitExceeded, CompletionError) as exc:
        raise_http_error(exc)
