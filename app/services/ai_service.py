"""
AI服务 - 通过OpenAI兼容接口生成写作建议
"""
import logging
import httpx
from typing import Dict, Optional

from app.core.config import settings
from app.core.exceptions import ValidationFailed, ServiceUnavailable, UpstreamServiceError
from app.core.prompts import prompt_manager

logger = logging.getLogger(__name__)


class AIService:
    """AI建议服务类"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        初始化AI服务

        Args:
            api_key: 接口密钥，默认读取配置
            api_base: 接口地址，默认读取配置
            model: 模型名称，默认读取配置
            transport: 自定义HTTP传输层（测试时注入）
        """
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.api_base = (api_base or settings.OPENAI_API_BASE).rstrip("/")
        self.model = model or settings.OPENAI_MODEL
        self.transport = transport

    def _build_messages(self, user_prompt: str, suggestion_type: str) -> list:
        """
        构建消息列表
        """
        return [
            {"role": "system", "content": prompt_manager.get_prompt(suggestion_type)},
            {"role": "user", "content": user_prompt},
        ]

    async def suggest(self, prompt: str, suggestion_type: str) -> Dict[str, str]:
        """
        生成建议

        Args:
            prompt: 用户提供的内容
            suggestion_type: title / excerpt / content

        Returns:
            {suggestion_type: 建议文本}

        Raises:
            ValidationFailed: 提示内容为空
            ServiceUnavailable: 未配置接口密钥
            UpstreamServiceError: 接口调用失败或返回为空
        """
        if not prompt or not prompt.strip():
            raise ValidationFailed({"prompt": "提示内容不能为空"})
        if not self.api_key:
            raise ServiceUnavailable("AI建议服务未配置")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.model,
            "messages": self._build_messages(prompt, suggestion_type),
            "max_tokens": 2000 if suggestion_type == "content" else 100,
            "temperature": 0.7,
        }

        url = f"{self.api_base}/chat/completions"

        try:
            async with httpx.AsyncClient(timeout=settings.OPENAI_TIMEOUT_SECONDS, transport=self.transport) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error("AI接口请求失败: %s", e)
            raise UpstreamServiceError("AI接口请求失败")

        if response.status_code != 200:
            logger.error("AI接口调用失败: %s - %s", response.status_code, response.text[:500])
            raise UpstreamServiceError(f"AI接口调用失败: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None

        if not content or not content.strip():
            raise UpstreamServiceError("AI接口未返回建议内容")

        return {suggestion_type: content.strip()}
