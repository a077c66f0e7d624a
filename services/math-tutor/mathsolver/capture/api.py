import io
from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from ..deps import get_capture_session, get_workbench
from ..tutor.workbench import Workbench
from .geometry import Tool
from .session import CaptureSession

router = APIRouter(prefix="/api/v1/capture", tags=["capture"])

NOT_SHARING = "Screen sharing is not active"


class StartRequest(BaseModel):
    display_width: int = Field(0, ge=0)
    display_height: int = Field(0, ge=0)
    tool: Tool = "freehand"


class DisplaySize(BaseModel):
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class ToolRequest(BaseModel):
    tool: Tool


class PointerEvent(BaseModel):
    x: float
    y: float


class CaptureRequest(BaseModel):
    solve: bool = False


@router.get("/session")
async def session_status(session: CaptureSession = Depends(get_capture_session)):
    return session.status()


@router.post("/session")
async def start_session(request: StartRequest = StartRequest(), session: CaptureSession = Depends(get_capture_session)):
    """
    Starts screen sharing. Permission / availability failures leave the
    session idle and are reported once through the notifications feed.
    """
    session.set_tool(request.tool)
    ok = await session.start()
    if not ok:
        return JSONResponse({"error": "Screen sharing failed", **session.status()}, status_code=403)
    if request.display_width and request.display_height:
        session.set_display_size(request.display_width, request.display_height)
    return session.status()


@router.delete("/session")
async def stop_session(session: CaptureSession = Depends(get_capture_session)):
    session.stop()
    return session.status()


@router.post("/display")
async def set_display(request: DisplaySize, session: CaptureSession = Depends(get_capture_session)):
    session.set_display_size(request.width, request.height)
    return session.status()


@router.post("/tool")
async def set_tool(request: ToolRequest, session: CaptureSession = Depends(get_capture_session)):
    session.set_tool(request.tool)
    return session.status()


@router.post("/draw-mode")
async def toggle_draw_mode(session: CaptureSession = Depends(get_capture_session)):
    session.toggle_draw_mode()
    return session.status()


@router.post("/pointer/down")
async def pointer_down(event: PointerEvent, session: CaptureSession = Depends(get_capture_session)):
    session.pointer_down(event.x, event.y)
    return session.status()


@router.post("/pointer/move")
async def pointer_move(event: PointerEvent, session: CaptureSession = Depends(get_capture_session)):
    session.pointer_move(event.x, event.y)
    return session.status()


@router.post("/pointer/up")
async def pointer_up(session: CaptureSession = Depends(get_capture_session)):
    session.pointer_up()
    return session.status()


@router.post("/erase")
async def erase(session: CaptureSession = Depends(get_capture_session)):
    session.erase()
    return session.status()


@router.get("/overlay")
async def overlay(session: CaptureSession = Depends(get_capture_session)):
    """Current annotation layer as a transparent PNG sized to the displayed video."""
    canvas = session.overlay.canvas
    if canvas is None or not canvas.width or not canvas.height:
        return Response(status_code=204)
    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")


@router.post("")
async def capture(
    request: CaptureRequest = CaptureRequest(),
    session: CaptureSession = Depends(get_capture_session),
    workbench: Workbench = Depends(get_workbench),
):
    """
    Composites the current frame with the committed annotations at native
    resolution. With `solve`, the capture goes straight to the solver.
    """
    image = await run_in_threadpool(session.capture)
    if image is None:
        return JSONResponse({"error": NOT_SHARING if not session.is_sharing else "No frame available"}, status_code=409)
    if not request.solve:
        return {"image": image}

    result = await run_in_threadpool(workbench.analyze, image, "capture")
    body = {"image": image, **result.model_dump(exclude_none=True, exclude={"status_code"})}
    return JSONResponse(body, status_code=result.status_code)
