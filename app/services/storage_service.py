"""
本地文件存储服务
用于文章图片上传，文件通过 UPLOAD_URL_PREFIX 对外提供访问
"""
import logging
import time
import uuid
from pathlib import Path
from typing import Dict, Optional
from fastapi.concurrency import run_in_threadpool
from werkzeug.utils import secure_filename

from app.core.config import settings
from app.core.exceptions import ValidationFailed

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "news-articles"

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class StorageService:
    """本地存储服务类"""

    def __init__(
        self,
        root: Optional[str] = None,
        url_prefix: Optional[str] = None,
        base_url: Optional[str] = None,
        max_bytes: Optional[int] = None
    ):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.url_prefix = "/" + (url_prefix or settings.UPLOAD_URL_PREFIX).strip("/")
        self.base_url = (base_url if base_url is not None else settings.PUBLIC_BASE_URL).rstrip("/")
        self.max_bytes = max_bytes or settings.UPLOAD_MAX_BYTES

    def build_path(self, filename: str, content_type: str) -> str:
        """
        生成存储路径：news-articles/{时间戳}_{uuid}_{清理后的文件名}
        """
        name = secure_filename(filename or "") or f"upload.{ALLOWED_CONTENT_TYPES[content_type]}"
        return f"{UPLOAD_FOLDER}/{int(time.time())}_{uuid.uuid4().hex}_{name}"

    def public_url(self, path: str) -> str:
        return f"{self.base_url}{self.url_prefix}/{path}"

    def path_from_url(self, url: str) -> Optional[str]:
        """从公开URL解析出存储路径，不属于本存储的URL返回None"""
        prefix = f"{self.base_url}{self.url_prefix}/"
        if url.startswith(prefix):
            path = url[len(prefix):]
        elif url.startswith(self.url_prefix + "/"):
            path = url[len(self.url_prefix) + 1:]
        else:
            return None

        if not path or Path(path).is_absolute() or ".." in Path(path).parts:
            return None
        return path

    def resolve_target(self, path: str) -> Optional[Path]:
        """存储路径对应的文件，落在存储根目录之外时返回None"""
        root = self.root.resolve()
        target = (root / path).resolve()
        if not target.is_relative_to(root) or target == root:
            return None
        return target

    def validate(self, content_type: Optional[str], size: int) -> None:
        """
        Raises:
            ValidationFailed: 文件类型不支持或超过大小限制
        """
        if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES:
            raise ValidationFailed({"file": "只支持 JPEG、PNG、WebP 格式的图片"})
        if size == 0:
            raise ValidationFailed({"file": "文件内容为空"})
        if size > self.max_bytes:
            raise ValidationFailed({"file": f"文件大小不能超过 {self.max_bytes // (1024 * 1024)}MB"})

    async def upload(self, content: bytes, filename: str, content_type: Optional[str]) -> Dict:
        """
        保存上传的图片

        Returns:
            dict: {"url": 公开URL, "path": 存储路径, "size": 字节数, "contentType": 类型}
        """
        content_type = (content_type or "").lower()
        self.validate(content_type, len(content))

        path = self.build_path(filename, content_type)
        target = self.root / path

        def write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)

        await run_in_threadpool(write)
        logger.info("文件已上传: %s (%s bytes)", path, len(content))

        return {
            "url": self.public_url(path),
            "path": path,
            "size": len(content),
            "contentType": content_type,
        }

    async def delete(self, url: str) -> bool:
        """
        按公开URL删除文件

        Returns:
            bool: 文件存在并已删除返回True
        """
        path = self.path_from_url(url)
        if not path:
            return False

        target = self.resolve_target(path)
        if target is None:
            logger.warning("拒绝删除存储目录之外的文件: %s", url)
            return False

        def remove() -> bool:
            if not target.is_file():
                return False
            target.unlink()
            return True

        deleted = await run_in_threadpool(remove)
        if deleted:
            logger.info("文件已删除: %s", path)
        return deleted


storage_service = StorageService()
