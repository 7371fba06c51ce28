from fastapi import APIRouter, Depends, status

from careerpilot.api.deps import get_document_store, raise_http_error
from careerpilot.core.security import current_user_id
from careerpilot.schemas.documents import JobCreateRequest, JobResponse
from careerpilot.schemas.profile import JobProfile
from careerpilot.services.tailoring_service import analyze_saved_job
from careerpilot.storage.document_store import DocumentNotFoundError, DocumentStore

router = APIRouter()


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreateRequest,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    row = store.create_job(
        user_id,
        title=payload.title,
        company=payload.company,
        description=payload.description,
        requirements=payload.requirements,
        location=payload.location,
        url=payload.url,
    )
    return JobResponse.model_validate(row)


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(
    job_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        return JobResponse.model_validate(store.get_job(user_id, job_id))
    except DocumentNotFoundError as exc:
        raise_http_error(exc)


@router.post("/jobs/{job_id}/analyze", response_model=JobProfile)
def analyze_job_posting(
    job_id: str,
    user_id: str = Depends(current_user_id),
    store: DocumentStore = Depends(get_document_store),
):
    try:
        job = store.get_job(user_id, job_id)
    except DocumentNotFoundError as exc:
        raise_http_error(exc)
    return analyze_saved_job(job)
