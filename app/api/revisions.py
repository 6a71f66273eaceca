"""
文章修订记录API
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.api.deps import require_writer
from app.core.exceptions import NotFoundError, ValidationFailed
from app.db.database import get_db
from app.models.post import Post
from app.models.post_revision import PostRevision
from app.schemas.common import ResponseModel
from app.schemas.post import RevisionCreate, RevisionResponse
from app.services.auth_service import AuthContext
from app.services.post_service import PostService
from app.services.user_service import load_users_map, author_info

router = APIRouter(prefix="/api", tags=["修订记录"])


async def build_revision_responses(db: AsyncSession, revisions: list) -> list:
    users_map = await load_users_map(db, [r.editor_id for r in revisions])
    return [
        RevisionResponse(
            id=revision.id,
            postId=revision.post_id,
            editorId=revision.editor_id,
            editor=author_info(users_map.get(revision.editor_id)),
            bodySnapshot=revision.body_snapshot,
            createdAt=revision.created_at
        )
        for revision in revisions
    ]


@router.get("/posts/{post_id}/revisions", response_model=ResponseModel)
async def list_post_revisions(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    文章的修订记录（最新的在前）
    """
    await PostService.get(db, post_id)

    result = await db.execute(
        select(PostRevision)
        .where(PostRevision.post_id == post_id)
        .order_by(PostRevision.created_at.desc(), PostRevision.id.desc())
    )
    revisions = list(result.scalars().all())

    return ResponseModel(code=200, data=await build_revision_responses(db, revisions))


@router.get("/revisions/{revision_id}", response_model=ResponseModel)
async def get_revision(
    revision_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    修订详情
    """
    revision = await db.get(PostRevision, revision_id)
    if not revision:
        raise NotFoundError("修订记录不存在")

    responses = await build_revision_responses(db, [revision])
    return ResponseModel(code=200, data=responses[0])


@router.post("/revisions", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_revision(
    request: RevisionCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(require_writer)
):
    """
    手动保存修订快照（编辑者为当前用户）
    """
    post = await db.get(Post, request.postId)
    if not post:
        raise ValidationFailed({"postId": "文章不存在"})

    revision = PostRevision(
        post_id=request.postId,
        editor_id=auth.user_id,
        body_snapshot=request.bodySnapshot
    )
    db.add(revision)
    await db.commit()
    await db.refresh(revision)

    responses = await build_revision_responses(db, [revision])
    return ResponseModel(code=201, message="修订已保存", data=responses[0])
