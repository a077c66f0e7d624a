from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from ..deps import get_conversation, get_notifier, get_workbench
from ..notifications import Notifier
from ..relay.solver import SolveRequest
from ..utils import bytes_to_data_url, is_image_data_url
from .conversation import Conversation
from .workbench import Workbench

router = APIRouter(prefix="/api/v1", tags=["tutor"])


class ChatSendRequest(BaseModel):
    content: str = ""
    image: Optional[str] = None


class AttachmentRequest(BaseModel):
    image: str


def _result_response(result, **extra) -> JSONResponse:
    body = {**extra, **result.model_dump(exclude_none=True, exclude={"status_code"})}
    return JSONResponse(body, status_code=result.status_code)


@router.post("/solve")
async def solve(request: SolveRequest, workbench: Workbench = Depends(get_workbench)):
    result = await run_in_threadpool(workbench.analyze, request.image, request.type)
    return _result_response(result)


@router.post("/solve/upload")
async def solve_upload(file: UploadFile = File(...), workbench: Workbench = Depends(get_workbench)):
    """
    Accepts an uploaded picture of a problem. Anything that is not an image
    is refused before it reaches the gateway.
    """
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        return JSONResponse({"error": "Please upload an image file"}, status_code=415)
    contents = await file.read()
    image = bytes_to_data_url(contents, content_type)
    result = await run_in_threadpool(workbench.analyze, image, "upload")
    return _result_response(result, filename=file.filename or "upload")


@router.get("/solution")
async def current_solution(workbench: Workbench = Depends(get_workbench)):
    return {
        "is_loading": workbench.is_loading,
        "solution": workbench.solution,
        "image": workbench.captured_image,
    }


@router.get("/history")
async def list_history(workbench: Workbench = Depends(get_workbench)):
    return {
        "count": len(workbench.history),
        "items": [
            {"id": i.id, "image": i.image, "preview": i.preview, "timestamp": i.timestamp.isoformat()}
            for i in workbench.history.items
        ],
    }


@router.post("/history/{item_id}/select")
async def select_history(item_id: str, workbench: Workbench = Depends(get_workbench)):
    try:
        item = workbench.select(item_id)
    except KeyError:
        return JSONResponse({"error": "History item not found"}, status_code=404)
    return {"id": item.id, "image": item.image, "solution": item.solution}


@router.delete("/history")
async def clear_history(workbench: Workbench = Depends(get_workbench)):
    workbench.clear_history()
    return {"count": 0}


@router.get("/chat/messages")
async def chat_messages(conversation: Conversation = Depends(get_conversation)):
    return {
        "messages": [m.model_dump() for m in conversation.messages],
        "pending_image": conversation.pending_image,
        "is_loading": conversation.is_loading,
    }


@router.post("/chat/attachment")
async def attach_image(request: AttachmentRequest, conversation: Conversation = Depends(get_conversation)):
    if not is_image_data_url(request.image):
        return JSONResponse({"error": "Attachment must be an image data URL"}, status_code=400)
    conversation.attach_image(request.image)
    return {"pending_image": True}


@router.delete("/chat/attachment")
async def discard_image(conversation: Conversation = Depends(get_conversation)):
    conversation.discard_image()
    return {"pending_image": False}


@router.post("/chat/messages")
async def send_message(request: ChatSendRequest, conversation: Conversation = Depends(get_conversation)):
    if request.image:
        if not is_image_data_url(request.image):
            return JSONResponse({"error": "Attachment must be an image data URL"}, status_code=400)
        conversation.attach_image(request.image)
    reply = await run_in_threadpool(conversation.send, request.content)
    if reply is None:
        return JSONResponse({"error": "Nothing to send"}, status_code=409)
    return reply.model_dump()


@router.get("/notifications")
async def notifications(notifier: Notifier = Depends(get_notifier)):
    return {"notifications": [t.model_dump() for t in notifier.drain()]}
