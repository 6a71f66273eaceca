"""
附件管理API（头像、logo、pdf等）
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.api.deps import get_auth_context
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationFailed
from app.db.database import get_db
from app.models.attachment import Attachment
from app.models.user import User, ROLE_ADMIN
from app.schemas.common import ResponseModel
from app.schemas.misc import AttachmentCreate, AttachmentResponse
from app.services.auth_service import AuthContext

router = APIRouter(prefix="/api", tags=["附件管理"])


def to_attachment_response(attachment: Attachment) -> AttachmentResponse:
    return AttachmentResponse(
        id=attachment.id,
        userId=attachment.user_id,
        type=attachment.type,
        url=attachment.url,
        metadata=attachment.meta,
        createdAt=attachment.created_at
    )


async def get_visible_attachment(db: AsyncSession, attachment_id: int, auth: AuthContext) -> Attachment:
    """查询附件，非管理员只能访问自己的附件"""
    attachment = await db.get(Attachment, attachment_id)
    if not attachment:
        raise NotFoundError("附件不存在")
    if attachment.user_id != auth.user_id and not auth.has_role(ROLE_ADMIN):
        raise PermissionDenied("无权访问该附件")
    return attachment


@router.get("/attachments", response_model=ResponseModel)
async def list_attachments(
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    附件列表（管理员可见全部，其他用户只能看到自己的）
    """
    query = select(Attachment)
    if not auth.has_role(ROLE_ADMIN):
        query = query.where(Attachment.user_id == auth.user_id)

    result = await db.execute(query.order_by(Attachment.created_at.desc(), Attachment.id.desc()))
    attachments = result.scalars().all()

    return ResponseModel(code=200, data=[to_attachment_response(a) for a in attachments])


@router.post("/attachments", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def create_attachment(
    request: AttachmentCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    创建附件（只有管理员可以为其他用户创建）
    """
    user_id = request.userId or auth.user_id
    if user_id != auth.user_id:
        if not auth.has_role(ROLE_ADMIN):
            raise PermissionDenied("无权为其他用户创建附件")
        if not await db.get(User, user_id):
            raise ValidationFailed({"userId": "用户不存在"})

    attachment = Attachment(
        user_id=user_id,
        type=request.type,
        url=request.url,
        meta=request.metadata
    )
    db.add(attachment)
    await db.commit()
    await db.refresh(attachment)

    return ResponseModel(code=201, message="附件创建成功", data=to_attachment_response(attachment))


@router.get("/attachments/{attachment_id}", response_model=ResponseModel)
async def get_attachment(
    attachment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    附件详情
    """
    attachment = await get_visible_attachment(db, attachment_id, auth)
    return ResponseModel(code=200, data=to_attachment_response(attachment))


@router.delete("/attachments/{attachment_id}", response_model=ResponseModel)
async def delete_attachment(
    attachment_id: int,
    db: AsyncSession = Depends(get_db),
    auth: AuthContext = Depends(get_auth_context)
):
    """
    删除附件
    """
    attachment = await get_visible_attachment(db, attachment_id, auth)
    await db.delete(attachment)
    await db.commit()
    return ResponseModel(code=200, message="附件删除成功")
