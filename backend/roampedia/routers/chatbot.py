"""Chatbot router — travel Q&A over public country data."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from roampedia.services.chatbot_service import chatbot_service

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatRequest(BaseModel):
    message: str | None = None


@router.post("")
async def chat(req: ChatRequest):
    if not req.message or not req.message.strip():
        return JSONResponse(status_code=400, content={"response": "Please send a non-empty 'message' field."})

    try:
        reply = await chatbot_service.handle_message(req.message)
    except Exception as e:
        logger.error(f"Chatbot error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"response": "Sorry, something went wrong. Please try again."})

    return {"response": reply}
