"""
AI提示词配置管理
定义编辑后台各类写作建议的系统提示词
"""
from typing import Dict


class SystemPrompts:
    """系统提示词配置类"""

    # 标题建议
    SUGGEST_TITLE = (
        "Generate a compelling, SEO-friendly news article title based on the following content. "
        "Keep it concise, engaging, and under 60 characters."
    )

    # 摘要建议
    SUGGEST_EXCERPT = (
        "Generate a brief, engaging excerpt/summary for a news article based on the following content. "
        "Keep it between 150-200 characters."
    )

    # 正文建议
    SUGGEST_CONTENT = (
        "Generate a well-structured, journalistic news article based on the following prompt. "
        "Include relevant details, quotes if applicable, and maintain a professional tone. "
        "The article should be at least 500 words."
    )


class PromptManager:
    """提示词管理器"""

    def __init__(self):
        """初始化提示词字典"""
        self._prompts: Dict[str, str] = {
            "title": SystemPrompts.SUGGEST_TITLE,
            "excerpt": SystemPrompts.SUGGEST_EXCERPT,
            "content": SystemPrompts.SUGGEST_CONTENT,
        }

    def get_prompt(self, prompt_type: str) -> str:
        """
        获取系统提示词

        Args:
            prompt_type: 提示词类型（title / excerpt / content）

        Returns:
            系统提示词
        """
        return self._prompts.get(prompt_type, SystemPrompts.SUGGEST_CONTENT)


# 创建全局提示词管理器实例
prompt_manager = PromptManager()
