"""
Resolution API Routes

Resolve a book by ISBN or by title/author/publisher.
"""

from fastapi import APIRouter, Depends, Query
from loguru import logger

from bibresolver.api.dependencies import get_resolution_service
from bibresolver.api.schemas import ErrorResponse, ResolvedBookResponse, ResolveRequest
from bibresolver.errors import NotFoundError
from bibresolver.service import BookResolutionService


router = APIRouter(prefix="/resolve", tags=["resolve"])


@router.get(
    "/isbn/{isbn}",
    response_model=ResolvedBookResponse,
    responses={
        404: {"model": ErrorResponse, "description": "No catalog knows this ISBN"},
    },
)
async def resolve_isbn(
    isbn: str,
    parallel: bool = Query(False, description="Also search classifications by the found title and author"),
    service: BookResolutionService = Depends(get_resolution_service),
):
    """
    Resolve a book by ISBN-10 or ISBN-13.
    """
    logger.info(f"Resolve request for ISBN {isbn} (parallel={parallel})")

    if parallel:
        record = await service.resolve_by_isbn_parallel(isbn)
    else:
        record = await service.resolve_by_isbn(isbn)

    if record is None:
        raise NotFoundError("Book", isbn)

    return ResolvedBookResponse.from_record(record)


@router.post(
    "",
    response_model=ResolvedBookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Blank query"},
        404: {"model": ErrorResponse, "description": "Nothing found"},
    },
)
async def resolve_query(
    request: ResolveRequest,
    service: BookResolutionService = Depends(get_resolution_service),
):
    """
    Resolve a book from any combination of ISBN, title, author and publisher.

    The ISBN is used when present; otherwise title and author are searched
    in the classification catalogs.
    """
    query = request.to_query().validate()
    record = await service.resolve(query)

    if record is None:
        identifier = query.isbn or query.title or query.author or query.publisher
        raise NotFoundError("Book", identifier)

    return ResolvedBookResponse.from_record(record)
