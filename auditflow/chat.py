"""Chat assistant client: conversation state, REST calls and the SSE stream.

``ChatStore`` holds what the chat screen shows (conversations, messages,
the text being streamed, the side panel, file processing statuses,
pending confirmations and reviews). ``ChatClient`` talks to the API and
feeds the store; ``send_message`` consumes ``GET /api/chat/stream`` and
dispatches each event by its ``type``.
"""

import dataclasses
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx

from .api import ApiError, AuditFlowClient
from .models import Record
from .sse import aiter_events
from .validators import guess_mime_type, validate_upload_files

log = logging.getLogger(__name__)

MESSAGE_ROLES = ("USER", "ASSISTANT", "SYSTEM")
SIDE_PANEL_TYPES = ("table", "chart", "document", "json")
PROCESSING_STAGES = (
    "uploading",
    "parsing",
    "classifying",
    "extracting",
    "validating",
    "ready",
    "saved",
    "error",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


class ChatStreamError(ApiError):
    """The chat stream could not be opened (network failure or non-2xx status)."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass
class ChatMessage(Record):
    id: str = field(default_factory=_new_id)
    role: str = "USER"
    content: str = ""
    tool_calls: list[Any] | None = None
    tool_results: list[Any] | None = None
    attachments: list[str] | None = None
    created_at: str = field(default_factory=_now)


@dataclass
class Conversation(Record):
    id: str = ""
    title: str = ""
    created_at: str | None = None
    updated_at: str | None = None


@dataclass
class SidePanelData:
    type: str
    title: str
    data: Any = None


@dataclass
class FileUploadStatus(Record):
    file_id: str = ""
    file_name: str = ""
    mime_type: str = ""
    file_size: int = 0
    upload_progress: int = 0
    processing_stage: str = "uploading"
    document_type: str | None = None
    confidence: float | None = None
    extracted_data: Any = None
    issues: list[str] | None = None
    error: str | None = None


@dataclass
class ConfirmationRequest:
    action: str
    data: Any
    message: str
    id: str = field(default_factory=_new_id)
    resolved: bool = False
    accepted: bool | None = None


@dataclass
class ReviewRequest:
    issues: list[str]
    data: Any
    id: str = field(default_factory=_new_id)
    resolved: bool = False


@dataclass
class QuickAction:
    id: str
    label: str
    prompt: str
    icon: str | None = None


DEFAULT_QUICK_ACTIONS = (
    QuickAction("upload", "Upload Files", "", "Upload"),
    QuickAction("unpaid", "Show Unpaid Invoices", "Show me all unpaid invoices", "IndianRupee"),
    QuickAction(
        "gst",
        "GST Status",
        "Show me GST reconciliation status for this month",
        "FileText",
    ),
    QuickAction(
        "dashboard",
        "Today's Summary",
        "Give me today's summary - new uploads, pending reconciliations, and key metrics",
        "LayoutDashboard",
    ),
)


@dataclass
class StreamChunk(Record):
    """One decoded event of the chat stream."""

    type: str = ""
    text: str | None = None
    tool_name: str | None = None
    tool_input: Any = None
    tool_result: Any = None
    error: str | None = None
    usage: Any = None
    file_id: str | None = None
    file_name: str | None = None
    document_type: str | None = None
    confidence: float | None = None
    stage: str | None = None
    progress: int | None = None
    table_data: dict[str, Any] | None = None
    confirmation_data: dict[str, Any] | None = None
    review_data: dict[str, Any] | None = None

    def invalid_field(self) -> str | None:
        """Name of the first field whose value has the wrong JSON type, if any."""
        for name in ("table_data", "confirmation_data", "review_data"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, dict):
                return name
        for name in (
            "type",
            "text",
            "tool_name",
            "error",
            "file_id",
            "file_name",
            "document_type",
            "stage",
        ):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                return name
        for name in ("confidence", "progress"):
            value = getattr(self, name)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, (int, float))
            ):
                return name
        if self.review_data and not isinstance(self.review_data.get("issues") or [], list):
            return "review_data.issues"
        return None


@dataclass
class StreamResult:
    """Outcome of one ``send_message`` call."""

    text: str = ""
    events: int = 0
    terminal: bool = False
    error: str | None = None
    tool_calls: list[str] = field(default_factory=list)
    tables: list[dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class ChatStore:
    """Chat state container. Every action notifies subscribers."""

    def __init__(self, quick_actions: Iterable[QuickAction] = DEFAULT_QUICK_ACTIONS):
        self.conversations: list[Conversation] = []
        self.active_conversation_id: str | None = None

        self.messages: list[ChatMessage] = []
        self.streaming_message = ""
        self.is_streaming = False
        self.active_tool: str | None = None

        self.side_panel_open = False
        self.side_panel_data: SidePanelData | None = None

        self.uploading_files: list[Path] = []
        self.upload_progress: dict[str, int] = {}

        self.file_statuses: dict[str, FileUploadStatus] = {}
        self.pending_confirmations: list[ConfirmationRequest] = []
        self.pending_reviews: list[ReviewRequest] = []
        self.quick_actions: list[QuickAction] = list(quick_actions)

        self._subscribers: list[Callable[["ChatStore"], None]] = []

    def subscribe(self, callback: Callable[["ChatStore"], None]) -> Callable[[], None]:
        """Call ``callback(store)`` after every change. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _changed(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    # ----- Conversations -----

    def set_conversations(self, conversations: list[Conversation]) -> None:
        self.conversations = list(conversations)
        self._changed()

    def set_active_conversation(self, conversation_id: str) -> None:
        self.active_conversation_id = conversation_id
        self.messages = []
        self._changed()

    def add_conversation(self, conversation: Conversation) -> None:
        self.conversations = [conversation, *self.conversations]
        self.active_conversation_id = conversation.id
        self._changed()

    def delete_conversation(self, conversation_id: str) -> None:
        self.conversations = [c for c in self.conversations if c.id != conversation_id]
        if self.active_conversation_id == conversation_id:
            self.active_conversation_id = None
        self._changed()

    # ----- Messages -----

    def set_messages(self, messages: list[ChatMessage]) -> None:
        self.messages = list(messages)
        self._changed()

    def add_message(self, message: ChatMessage) -> None:
        self.messages = [*self.messages, message]
        self._changed()

    def append_to_streaming_message(self, chunk: str) -> None:
        self.streaming_message += chunk
        self._changed()

    def clear_streaming_message(self) -> None:
        self.streaming_message = ""
        self._changed()

    def set_streaming(self, is_streaming: bool) -> None:
        self.is_streaming = is_streaming
        self._changed()

    def set_active_tool(self, tool_name: str | None) -> None:
        self.active_tool = tool_name
        self._changed()

    # ----- Side panel -----

    def set_side_panel_data(self, data: SidePanelData | None) -> None:
        self.side_panel_data = data
        self.side_panel_open = data is not None
        self._changed()

    def toggle_side_panel(self) -> None:
        self.side_panel_open = not self.side_panel_open
        self._changed()

    # ----- Uploads -----

    def add_uploading_file(self, path: Path) -> None:
        self.uploading_files = [*self.uploading_files, path]
        self._changed()

    def remove_uploading_file(self, file_name: str) -> None:
        self.uploading_files = [p for p in self.uploading_files if p.name != file_name]
        self._changed()

    def set_upload_progress(self, file_name: str, progress: int) -> None:
        self.upload_progress = {**self.upload_progress, file_name: progress}
        self._changed()

    # ----- File processing -----

    def set_file_status(self, file_id: str, **changes: Any) -> None:
        """Merge ``changes`` into the status for ``file_id``, creating it if needed."""
        current = self.file_statuses.get(file_id) or FileUploadStatus(file_id=file_id)
        updated = dataclasses.replace(current, **changes, file_id=file_id)
        self.file_statuses = {**self.file_statuses, file_id: updated}
        self._changed()

    def remove_file_status(self, file_id: str) -> None:
        self.file_statuses = {k: v for k, v in self.file_statuses.items() if k != file_id}
        self._changed()

    # ----- Confirmations and reviews -----

    def add_confirmation(self, confirmation: ConfirmationRequest) -> None:
        self.pending_confirmations = [*self.pending_confirmations, confirmation]
        self._changed()

    def resolve_confirmation(self, confirmation_id: str, accepted: bool) -> None:
        self.pending_confirmations = [
            dataclasses.replace(c, resolved=True, accepted=accepted)
            if c.id == confirmation_id
            else c
            for c in self.pending_confirmations
        ]
        self._changed()

    def add_review(self, review: ReviewRequest) -> None:
        self.pending_reviews = [*self.pending_reviews, review]
        self._changed()

    def resolve_review(self, review_id: str) -> None:
        self.pending_reviews = [
            dataclasses.replace(r, resolved=True) if r.id == review_id else r
            for r in self.pending_reviews
        ]
        self._changed()

    def set_quick_actions(self, actions: Iterable[QuickAction]) -> None:
        self.quick_actions = list(actions)
        self._changed()

    def reset(self) -> None:
        """Clear the current chat. Conversations and quick actions are kept."""
        self.messages = []
        self.streaming_message = ""
        self.is_streaming = False
        self.active_tool = None
        self.side_panel_data = None
        self.side_panel_open = False
        self.file_statuses = {}
        self.pending_confirmations = []
        self.pending_reviews = []
        self._changed()


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ChatClient:
    """Chat REST operations and message streaming on top of AuditFlowClient.

    The AuditFlowClient must already be open (inside its ``async with``).
    """

    def __init__(self, api: AuditFlowClient, store: ChatStore | None = None):
        self.api = api
        self.store = store if store is not None else ChatStore()

    # ----- Conversations -----

    async def fetch_conversations(self) -> list[Conversation]:
        resp = await self.api.get("/api/chat/conversations")
        data = resp.unwrap("Failed to fetch conversations")
        conversations = [Conversation.from_dict(c) for c in data or []]
        self.store.set_conversations(conversations)
        return conversations

    async def create_conversation(self) -> Conversation:
        resp = await self.api.post("/api/chat/conversations")
        conversation = Conversation.from_dict(resp.unwrap("Failed to create conversation"))
        self.store.add_conversation(conversation)
        return conversation

    async def fetch_conversation_history(
        self, conversation_id: str
    ) -> tuple[Conversation, list[ChatMessage]]:
        """Load a conversation and make it the active one."""
        resp = await self.api.get(f"/api/chat/conversations/{conversation_id}")
        data = resp.unwrap("Failed to fetch conversation") or {}
        conversation = Conversation.from_dict(data.get("conversation"))
        messages = [ChatMessage.from_dict(m) for m in data.get("messages") or []]
        self.store.set_active_conversation(conversation_id)
        self.store.set_messages(messages)
        return conversation, messages

    async def delete_conversation(self, conversation_id: str) -> None:
        resp = await self.api.delete(f"/api/chat/conversations/{conversation_id}")
        resp.unwrap("Failed to delete conversation")
        self.store.delete_conversation(conversation_id)

    async def upload_chat_file(self, path: str | Path) -> str:
        """Upload an attachment for the next message; returns its file id.

        Raises UploadValidationError before sending if the file breaks the
        type or size limits.
        """
        (path,) = validate_upload_files([path])
        mime_type = guess_mime_type(path) or "application/octet-stream"
        self.store.add_uploading_file(path)
        self.store.set_upload_progress(path.name, 0)
        try:
            with open(path, "rb") as fh:
                resp = await self.api.request(
                    "POST",
                    "/api/chat/upload",
                    files={"file": (path.name, fh, mime_type)},
                )
            data = resp.unwrap("Failed to upload file") or {}
            file_id = data.get("file_id")
            if not file_id:
                raise ApiError("Upload response did not include a file id", resp.status_code)
        finally:
            self.store.remove_uploading_file(path.name)
        self.store.set_upload_progress(path.name, 100)
        self.store.set_file_status(
            file_id,
            file_name=path.name,
            mime_type=mime_type,
            file_size=path.stat().st_size,
            upload_progress=100,
            processing_stage="parsing",
        )
        return file_id

    # ----- Streaming -----

    async def send_message(
        self,
        conversation_id: str,
        message: str,
        file_ids: Iterable[str] = (),
    ) -> StreamResult:
        """Send ``message`` and consume the assistant's streamed reply.

        Raises ChatStreamError if the stream cannot be opened. Once
        connected, the stream ending without ``done``/``error`` is treated
        as a normal close and any partial text is kept.
        """
        file_ids = list(file_ids)
        store = self.store
        store.add_message(
            ChatMessage(role="USER", content=message, attachments=file_ids)
        )
        store.clear_streaming_message()
        store.set_streaming(True)

        params = {"conversation_id": conversation_id, "message": message}
        if file_ids:
            params["file_ids"] = ",".join(file_ids)
        token = self.api.token
        if token:
            params["token"] = token

        result = StreamResult()
        connected = False
        try:
            async with self.api.open_stream("/api/chat/stream", params) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise ChatStreamError(
                        _stream_error(response.status_code, body), response.status_code
                    )
                connected = True
                async for sse in aiter_events(response.aiter_lines()):
                    try:
                        payload = sse.json()
                    except json.JSONDecodeError:
                        log.warning("Skipping malformed stream event: %r", sse.data[:200])
                        continue
                    if not isinstance(payload, dict):
                        log.warning("Skipping non-object stream event: %r", sse.data[:200])
                        continue
                    chunk = StreamChunk.from_dict(payload)
                    bad_field = chunk.invalid_field()
                    if bad_field:
                        log.warning(
                            "Skipping stream event %r with invalid %s", payload.get("type"), bad_field
                        )
                        continue
                    result.events += 1
                    self._dispatch(chunk, result)
                    if result.terminal:
                        break
        except ChatStreamError:
            store.set_streaming(False)
            raise
        except httpx.HTTPError as e:
            if not connected:
                store.set_streaming(False)
                raise ChatStreamError(str(e) or "Connection failed") from e
            log.warning("Chat stream interrupted: %s: %s", type(e).__name__, e)
            result.error = str(e) or type(e).__name__
        except BaseException:
            # The store never stays streaming; text received so far is kept
            if store.is_streaming:
                self._finish(result)
            raise

        if not result.terminal:
            log.warning("Chat stream closed without a done event")
            self._finish(result)
        return result

    def _dispatch(self, chunk: StreamChunk, result: StreamResult) -> None:
        store = self.store
        log.debug("Stream event: %s", chunk.type)

        if chunk.type == "content":
            store.append_to_streaming_message(chunk.text or "")
        elif chunk.type == "tool_call":
            log.info("Tool call: %s", chunk.tool_name)
            if chunk.tool_name:
                result.tool_calls.append(chunk.tool_name)
                store.set_active_tool(chunk.tool_name)
        elif chunk.type == "tool_result":
            store.set_active_tool(None)
            store.set_side_panel_data(
                SidePanelData(type="json", title=chunk.tool_name or "Result", data=chunk.tool_result)
            )
        elif chunk.type == "file_uploaded":
            if chunk.file_id:
                store.set_file_status(
                    chunk.file_id,
                    file_name=chunk.file_name or "",
                    processing_stage="ready",
                    upload_progress=100,
                    document_type=chunk.document_type,
                    confidence=chunk.confidence,
                )
        elif chunk.type == "processing_status":
            if chunk.file_id:
                stage = "ready" if chunk.stage == "completed" else chunk.stage
                changes: dict[str, Any] = {}
                if stage in PROCESSING_STAGES:
                    changes["processing_stage"] = stage
                if chunk.progress is not None:
                    changes["upload_progress"] = chunk.progress
                if chunk.document_type:
                    changes["document_type"] = chunk.document_type
                if chunk.confidence is not None:
                    changes["confidence"] = chunk.confidence
                store.set_file_status(chunk.file_id, **changes)
        elif chunk.type == "confirmation_request":
            data = chunk.confirmation_data or {}
            store.add_confirmation(
                ConfirmationRequest(
                    action=data.get("action", ""),
                    data=data.get("data"),
                    message=data.get("message") or "",
                )
            )
        elif chunk.type == "data_table":
            table = chunk.table_data or {}
            result.tables.append(table)
            store.set_side_panel_data(
                SidePanelData(type="table", title=table.get("title") or "Data", data=table)
            )
        elif chunk.type == "review_request":
            data = chunk.review_data or {}
            store.add_review(
                ReviewRequest(issues=list(data.get("issues") or []), data=data.get("data"))
            )
        elif chunk.type == "done":
            result.terminal = True
            self._finish(result)
        elif chunk.type == "error":
            result.terminal = True
            result.error = chunk.error or "Stream error"
            store.add_message(ChatMessage(role="ASSISTANT", content=f"Error: {result.error}"))
            store.clear_streaming_message()
            store.set_active_tool(None)
            store.set_streaming(False)
        else:
            log.debug("Ignoring unknown stream event type %r", chunk.type)

    def _finish(self, result: StreamResult) -> None:
        """Commit the streamed text as the assistant's message and stop streaming."""
        store = self.store
        result.text = store.streaming_message
        if result.text:
            store.add_message(ChatMessage(role="ASSISTANT", content=result.text))
        store.clear_streaming_message()
        store.set_active_tool(None)
        store.set_streaming(False)


def _stream_error(status_code: int, body: bytes) -> str:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"Chat stream failed with HTTP {status_code}"
