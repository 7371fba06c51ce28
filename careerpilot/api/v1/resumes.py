from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile, status

from careerpilot.ai.completion_client import CompletionClient, CompletionError
from careerpilot.api.deps import get_completion_client, get_document_store, get_usage_tracker, raise_http_error
from careerpilot.core.config import settings
from careerpilot.core.rate_limit import rate_limit
from careerpilot.core.security import current_user_id
from careerpilot.parsing import EmptyDocumentError, UnsupportedFileTypeError, extract_text
from careerpilot.schemas.documents import (
    JobReference,
    MatchScoreResponse,
    ResumeCreateRequest,
    ResumeKind,
    ResumeListResponse,
    ResumeResponse,
    ResumeUpdateRequest,
    TailoringResult,
)
from careerpilot.services.tailoring_service import (
    EmptyResumeError,
    get_tailoring_history,
    score_resume_against_job,
    tailor_resume_for_job,
)
from careerpilot.services.usage_tracker import UsageLimitExceeded, UsageTracker
from careerpilot.storage.document_store import DocumentNotFoundError, DocumentStore

router = APIRouter()


@router.post("/resumes", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
def create_resume(
    payload: ResumeCreateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    row = store.create_resume(
        user_id,
        file_name=payload.file_name,
        original_text=payload.text,
        metadata={"word_count": len(payload.text.split()), "file_type": "txt"},
    )
    return ResumeResponse.model_validate(row)


@router.post("/resumes/upload", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
def upload_resume(
    file: UploadFile = File(...),
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit.",
        )
    filename = file.filename or "resume"
    try:
        extracted = extract_text(filename, content)
    except (UnsupportedFileTypeError, EmptyDocumentError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    row = store.create_resume(
        user_id,
        file_name=filename,
        original_text=extracted.text,
        metadata={
            "file_type": extracted.file_type,
            "page_count": extracted.page_count,
            "word_count": extracted.word_count,
            "character_count": extracted.character_count,
            "extracted_at": extracted.extracted_at.isoformat(),
            "parsing_warnings": extracted.parsing_warnings,
        },
    )
    return ResumeResponse.model_validate(row)


@router.get("/resumes", response_model=ResumeListResponse)
def list_resumes(
    kind: ResumeKind | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    rows = store.list_resumes(user_id, kind=kind, limit=limit)
    return ResumeListResponse(items=[ResumeResponse.model_validate(row) for row in rows])


@router.get("/resumes/tailored/history", response_model=ResumeListResponse)
def tailoring_history(
    limit: int = Query(default=10, ge=1, le=100),
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    rows = get_tailoring_history(store, user_id, limit=limit)
    return ResumeListResponse(items=[ResumeResponse.model_validate(row) for row in rows])


@router.get("/resumes/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return ResumeResponse.model_validate(store.get_resume(user_id, resume_id))
    except DocumentNotFoundError as exc:
        raise_http_error(exc)


@router.put("/resumes/{resume_id}", response_model=ResumeResponse)
def update_resume(
    resume_id: str,
    payload: ResumeUpdateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        row = store.update_resume(user_id, resume_id, original_text=payload.text, file_name=payload.file_name)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)
    return ResumeResponse.model_validate(row)


@router.delete("/resumes/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resume(
    resume_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        store.delete_resume(user_id, resume_id)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/resumes/{resume_id}/tailor", response_model=TailoringResult)
@rate_limit()
def tailor_resume(
    request: Request,
    resume_id: str,
    payload: JobReference,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
    usage: UsageTracker = Depends(get_usage_tracker),
    client: CompletionClient = Depends(get_completion_client),
):
    _ = request
    try:
        return tailor_resume_for_job(
            store=store,
            usage=usage,
            client=client,
            user_id=user_id,
            resume_id=resume_id,
            job_id=payload.job_id,
        )
    except EmptyResumeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (DocumentNotFoundError, UsageLimitExceeded, CompletionError) as exc:
        raise_http_error(exc)


@router.post("/resumes/{resume_id}/match-score", response_model=MatchScoreResponse)
def match_score(
    resume_id: str,
    payload: JobReference,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return score_resume_against_job(store=store, user_id=user_id, resume_id=resume_id, job_id=payload.job_id)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)
