"""
Post REST endpoints.

List, read, create, update and delete community posts.
All endpoints delegate to ``PostService`` — no business logic here.
"""

from fastapi import APIRouter, Depends

from src.core.models import DeletePostResponse, Post, PostCreate, PostUpdate
from src.services.posts import PostService, get_post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[Post])
async def list_posts(service: PostService = Depends(get_post_service)):
    """Return every post, newest first."""
    return await service.list_posts()


@router.post("", response_model=Post, status_code=201)
async def create_post(body: PostCreate, service: PostService = Depends(get_post_service)):
    """Create a post; id and date are assigned by the server."""
    return await service.create_post(body)


@router.get("/{post_id}", response_model=Post)
async def get_post(post_id: int, service: PostService = Depends(get_post_service)):
    """Get a single post."""
    return await service.get_post(post_id)


@router.put("/{post_id}", response_model=Post)
async def update_post(
    post_id: int,
    body: PostUpdate,
    service: PostService = Depends(get_post_service),
):
    """Merge the supplied fields into an existing post."""
    return await service.update_post(post_id, body)


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(post_id: int, service: PostService = Depends(get_post_service)):
    """Delete a post."""
    await service.delete_post(post_id)
    return DeletePostResponse()
