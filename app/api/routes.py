import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from app.db import database
from app.services.errors import AllModelsUnavailableError, GenerationError, InvalidConversationError
from app.services.history import Message
from app.services.orchestrator import Orchestrator, orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

class ChatRequest(BaseModel):
    thread_id: str = Field(min_length=1)
    message: str = Field(min_length=1)

class RespondRequest(BaseModel):
    messages: List[Message]

def get_orchestrator() -> Orchestrator:
    return orchestrator

async def _run(engine: Orchestrator, messages: List[Message]) -> str:
    try:
        return await engine.respond(messages)
    except InvalidConversationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AllModelsUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=502, detail=e.message)

@router.get("/health")
async def health():
    return {"status": "operational", "system": "Synapse"}

@router.get("/thread")
async def get_threads():
    return await database.list_threads()

@router.get("/thread/{thread_id}")
async def get_thread(thread_id: str):
    if not await database.thread_exists(thread_id):
        raise HTTPException(status_code=404, detail="Thread not found")
    return await database.get_thread_messages(thread_id)

@router.delete("/thread/{thread_id}")
async def remove_thread(thread_id: str):
    if not await database.delete_thread(thread_id):
        raise HTTPException(status_code=404, detail="Thread not found")
    return {"success": "Thread deleted successfully"}

@router.post("/chat")
async def chat(req: ChatRequest, engine: Orchestrator = Depends(get_orchestrator)):
    if not await database.thread_exists(req.thread_id):
        await database.create_thread(req.thread_id, req.message)
    await database.save_message(req.thread_id, "user", req.message)

    rows = await database.get_thread_messages(req.thread_id)
    history = [Message(role=r["role"], content=r["content"]) for r in rows]

    reply = await _run(engine, history)
    await database.save_message(req.thread_id, "assistant", reply)
    logger.info("Thread %s answered (%d chars)", req.thread_id, len(reply))
    return {"reply": reply}

@router.post("/respond")
async def respond(req: RespondRequest, engine: Orchestrator = Depends(get_orchestrator)):
    return {"reply": await _run(engine, req.messages)}
