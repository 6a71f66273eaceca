"""
AI写作建议API
"""
from fastapi import APIRouter, Depends

from app.api.deps import require_writer
from app.schemas.common import ResponseModel
from app.schemas.misc import SuggestionRequest
from app.services.ai_service import AIService
from app.services.auth_service import AuthContext

router = APIRouter(prefix="/api", tags=["AI建议"])


def get_ai_service() -> AIService:
    return AIService()


@router.post("/ai/suggestions", response_model=ResponseModel)
async def generate_suggestion(
    request: SuggestionRequest,
    auth: AuthContext = Depends(require_writer),
    ai_service: AIService = Depends(get_ai_service)
):
    """
    根据提示生成标题、摘要或正文建议
    """
    suggestion = await ai_service.suggest(request.prompt, request.type)
    return ResponseModel(code=200, data=suggestion)
