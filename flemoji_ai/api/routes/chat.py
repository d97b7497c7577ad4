"""Chat endpoints: one-shot HTTP chat, routing preview and a WebSocket stream."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query, Request, WebSocket, WebSocketDisconnect
from pydantic import Field, ValidationError

from ...agents.memory import build_context
from ...models.agent import AgentFilters, AgentMetadata, AgentResponse, RoutingDecision, ToolResult
from ...models.base import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)
    conversation_id: Optional[str] = None
    user_id: Optional[str] = None
    filters: AgentFilters = Field(default_factory=AgentFilters)


class ChatResponse(CamelModel):
    message: str
    conversation_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    routing: RoutingDecision
    data: Optional[Any] = None
    metadata: AgentMetadata


def _new_conversation_id() -> str:
    return f"conv_{uuid.uuid4().hex[:12]}"


async def handle_message(state: Any, request: ChatRequest, on_tool_call=None) -> ChatResponse:
    """Route one user message with memory and preferences applied."""
    conversation_id = request.conversation_id or _new_conversation_id()
    user_id = request.user_id

    context = build_context(
        user_id,
        conversation_id,
        memory=state.memory,
        preferences=state.preferences,
        filters=request.filters,
    )
    decision = state.router.get_routing_decision(request.message)
    response: AgentResponse = await state.router.route(request.message, context, on_tool_call=on_tool_call)

    if user_id:
        state.memory.add(user_id, conversation_id, "user", request.message)
        state.memory.add(user_id, conversation_id, "assistant", response.message)
        state.preferences.update_from_message(user_id, request.message)
        state.preferences.update_from_response(user_id, response)

    payload = response.to_json_dict()
    return ChatResponse(
        message=response.message,
        conversation_id=conversation_id,
        routing=decision,
        data=payload.get("data"),
        metadata=response.metadata,
    )


@router.post("/ai/chat")
async def chat(body: ChatRequest, request: Request) -> Dict[str, Any]:
    """Answer one message and return the typed response."""
    result = await handle_message(request.app.state, body)
    return result.to_json_dict()


@router.get("/ai/route")
async def route_preview(request: Request, q: str = Query(min_length=1)) -> Dict[str, Any]:
    """Show which agent a query would go to, without running it."""
    decision = request.app.state.router.get_routing_decision(q)
    return decision.to_json_dict()


@router.websocket("/chat")
async def chat_websocket(websocket: WebSocket):
    """WebSocket endpoint for streaming chat.

    Protocol:
        Client sends: {"type": "message", "content": "...", "userId": "...", "conversationId": "...", "filters": {...}}
        Server sends:
            {"type": "intent", "intent": "discovery", "confidence": 0.13, "targetAgent": "DiscoveryAgent"}
            {"type": "tool_call", "tool": "search_tracks", "args": {...}, "error": null}
            {"type": "answer", "message": "...", "conversationId": "...", "data": {...}, "metadata": {...}}
            {"type": "error", "message": "..."}
        Client sends {"type": "reset"} to forget the current conversation.
    """
    await websocket.accept()
    state = websocket.app.state
    conversation_id: Optional[str] = None
    user_id: Optional[str] = None

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "error", "message": "Invalid JSON"})
                continue

            if not isinstance(msg, dict):
                await websocket.send_json({"type": "error", "message": "Invalid message"})
                continue

            if msg.get("type") == "reset":
                if user_id and conversation_id:
                    state.memory.clear(user_id, conversation_id)
                conversation_id = None
                await websocket.send_json({"type": "reset_ack"})
                continue

            if msg.get("type") != "message":
                continue

            try:
                request = ChatRequest(
                    message=(msg.get("content") or "").strip(),
                    conversation_id=msg.get("conversationId") or conversation_id,
                    user_id=msg.get("userId") or user_id,
                    filters=msg.get("filters") or {},
                )
            except ValidationError:
                await websocket.send_json({"type": "error", "message": "Invalid request: message is required"})
                continue

            decision = state.router.get_routing_decision(request.message)
            await websocket.send_json({"type": "intent", **decision.to_json_dict()})

            tool_calls: List[ToolResult] = []
            result = await handle_message(state, request, on_tool_call=tool_calls.append)
            conversation_id = result.conversation_id
            user_id = request.user_id

            # Tool calls are collected during the run and sent before the answer
            for tc in tool_calls:
                await websocket.send_json({
                    "type": "tool_call",
                    "tool": tc.tool_name,
                    "args": tc.arguments,
                    "error": tc.error,
                })

            await websocket.send_json({"type": "answer", **result.to_json_dict()})

    except WebSocketDisconnect:
        logger.debug("WebSocket client disconnected")
