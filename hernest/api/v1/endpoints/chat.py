"""Health assistant endpoint."""

from fastapi import APIRouter, status

from hernest.dependencies import CurrentPatient
from hernest.schemas.chat import ChatRequest, ChatResponse
from hernest.services.chat_service import ChatService

router = APIRouter()


@router.post(
    "",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Ask the health assistant",
)
async def chat(request: ChatRequest, _: CurrentPatient) -> ChatResponse:
    """Send a message and receive the assistant's general guidance."""
    return await ChatService().reply(request.message)
