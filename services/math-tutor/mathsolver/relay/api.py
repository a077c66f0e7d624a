from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from ..clients import ClientRegistry
from ..config import Settings
from ..deps import get_clients, get_settings
from .chat import ChatRequest, ChatResponse, chat_with_david
from .errors import RelayError
from .solver import SolveRequest, SolveResponse, solve_math_problem

router = APIRouter(prefix="/functions/v1", tags=["relay"])


@router.post("/analyze-math", response_model=SolveResponse, response_model_exclude_none=True)
def analyze_math(
    request: SolveRequest,
    clients: ClientRegistry = Depends(get_clients),
    settings: Settings = Depends(get_settings),
):
    """
    Relays one problem image to the AI gateway and returns its solution.
    """
    try:
        solution = solve_math_problem(request.image, request.type, clients.get_openai(), settings.model)
    except RelayError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    return SolveResponse(solution=solution)


@router.post("/david-chat", response_model=ChatResponse, response_model_exclude_none=True)
def david_chat(
    request: ChatRequest,
    clients: ClientRegistry = Depends(get_clients),
    settings: Settings = Depends(get_settings),
):
    """
    Relays the David conversation (system prompt prepended) to the gateway.
    """
    try:
        text = chat_with_david(request.messages, clients.get_openai(), settings.model)
    except RelayError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    return ChatResponse(response=text)
