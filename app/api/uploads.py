"""
文件上传API
"""
from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from app.api.deps import require_writer
from app.core.exceptions import NotFoundError
from app.schemas.common import ResponseModel
from app.schemas.misc import UploadResponse
from app.services.auth_service import AuthContext
from app.services.storage_service import StorageService, storage_service

router = APIRouter(prefix="/api", tags=["文件上传"])


def get_storage_service() -> StorageService:
    return storage_service


@router.post("/uploads", response_model=ResponseModel, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(..., description="图片文件（jpeg/png/webp，不超过5MB）"),
    auth: AuthContext = Depends(require_writer),
    storage: StorageService = Depends(get_storage_service)
):
    """
    上传文章图片，返回公开访问URL
    """
    if file.size is not None:
        storage.validate(file.content_type, file.size)
    # 最多读取 max_bytes + 1 字节，超出部分由 validate 拒绝
    content = await file.read(storage.max_bytes + 1)
    result = await storage.upload(content, file.filename, file.content_type)
    return ResponseModel(code=201, message="上传成功", data=UploadResponse(**result))


@router.delete("/uploads", response_model=ResponseModel)
async def delete_upload(
    url: str = Query(..., description="文件的公开URL"),
    auth: AuthContext = Depends(require_writer),
    storage: StorageService = Depends(get_storage_service)
):
    """
    按URL删除已上传的文件
    """
    if not await storage.delete(url):
        raise NotFoundError("文件不存在")
    return ResponseModel(code=200, message="文件删除成功")
