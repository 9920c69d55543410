"""
Tags Router

CRUD endpoints for the caller's tags. Tag names are unique per user;
deleting a tag detaches it from every book.
"""

from fastapi import APIRouter, status

from bookshelf.dependencies import CurrentUser, TagServiceDep
from bookshelf.schemas import MessageResponse, TagCreate, TagResponse, TagUpdate

router = APIRouter(
    prefix="/tags",
    tags=["Tags"],
    responses={
        401: {"description": "Authentication required"},
        404: {"description": "Tag not found"},
    },
)


@router.get(
    "",
    response_model=list[TagResponse],
    summary="List tags",
    description="List the caller's tags ordered by name.",
)
def list_tags(current_user: CurrentUser, tags: TagServiceDep) -> list[TagResponse]:
    return tags.list_tags(current_user.id)


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tag",
    description="Colour defaults to #6366f1 when omitted.",
)
def create_tag(tag_data: TagCreate, current_user: CurrentUser, tags: TagServiceDep) -> TagResponse:
    return tags.create(current_user.id, tag_data)


@router.put(
    "/{tag_id}",
    response_model=TagResponse,
    summary="Update a tag",
)
def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    current_user: CurrentUser,
    tags: TagServiceDep,
) -> TagResponse:
    return tags.update(current_user.id, tag_id, tag_data)


@router.delete(
    "/{tag_id}",
    response_model=MessageResponse,
    summary="Delete a tag",
)
def delete_tag(tag_id: int, current_user: CurrentUser, tags: TagServiceDep) -> MessageResponse:
    tags.delete(current_user.id, tag_id)
    return MessageResponse(message="Tag deleted")
