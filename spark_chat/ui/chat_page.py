"""NiceGUI landing form and chat view with rendered math."""

import logging
from datetime import datetime

from nicegui import Client, ui

from spark_chat.agent.chat_agent import ReplyService, ReplyTimeoutError
from spark_chat.config import AppConfig, get_app_config
from spark_chat.conversations.store import ConversationStore
from spark_chat.models.schemas import Author, Message, Rating
from spark_chat.rendering.renderer import render_message, render_plain

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f8fafc; min-height: 100vh; }

    .landing { background: linear-gradient(135deg, #eff6ff 0%, #e0e7ff 100%); }

    .card {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 16px;
        box-shadow: 0 20px 25px -5px rgba(0, 0, 0, 0.1);
    }

    .sidebar { background: white; border-right: 1px solid #e5e7eb; }
    .sidebar-item { border-radius: 8px; transition: background 0.2s; cursor: pointer; }
    .sidebar-item:hover { background: #f1f5f9; }
    .sidebar-item.active { background: #4f46e5; color: white; }

    .message-user { background: #4f46e5; color: white; border-radius: 8px; }
    .message-assistant { background: white; border: 1px solid #e5e7eb; border-radius: 8px; }

    .avatar-user { background: #e0e7ff; }
    .avatar-assistant { background: #4f46e5; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #4f46e5;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    /* Math styling */
    .math-display { margin: 0.75rem 0; overflow-x: auto; text-align: center; }
    .math-display math { font-size: 1.15em; }
    .math-inline math { font-size: 1.05em; }
</style>
"""

FEEDBACK_MESSAGES = {
    Rating.LIKE: (
        "Thanks for the feedback!",
        "We're glad you found this response helpful.",
    ),
    Rating.DISLIKE: (
        "Feedback received",
        "We'll use this to improve our responses.",
    ),
}


class ChatSession:
    """Per-page chat state: the store, its reply service and loading flags."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_app_config()
        self.store = ConversationStore(self.config)
        self.replies = ReplyService(self.store, config=self.config)
        self.sidebar_open: bool = True

    @property
    def is_loading(self) -> bool:
        active_id = self.store.active_conversation_id
        return active_id is not None and self.replies.is_pending(active_id)

    def cancel_all(self) -> None:
        for summary in self.store.list_conversations():
            self.replies.cancel_pending(summary.id)


def format_time(timestamp: datetime) -> str:
    return timestamp.astimezone().strftime("%I:%M %p")


@ui.page("/")
def chat_page(client: Client) -> None:
    """Landing form that turns into the chat view once a question is asked."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    client.on_disconnect(session.cancel_all)

    landing: ui.element
    chat_view: ui.row
    sidebar: ui.column
    sidebar_list: ui.column
    header_title: ui.label
    header_summary: ui.label
    messages_container: ui.column
    question_field: ui.textarea
    input_field: ui.input
    send_btn: ui.button
    toggle_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        color = "text-indigo-700" if is_user else "text-white"
        with ui.element("div").classes(
            f"w-8 h-8 rounded-full flex items-center justify-center shrink-0 {css}"
        ):
            ui.icon(icon).classes(f"{color} text-base")

    def rate(conversation_id: str, message_id: str, rating: Rating) -> None:
        session.store.rate_message(conversation_id, message_id, rating)
        title, description = FEEDBACK_MESSAGES[rating]
        ui.notify(title, caption=description, type="positive")
        refresh_messages()

    def render_rating_buttons(conversation_id: str, msg: Message) -> None:
        current = session.store.get_rating(msg.id)
        with ui.row().classes("gap-1"):
            for rating, icon, active_css in (
                (Rating.LIKE, "thumb_up", "bg-green-100 text-green-600"),
                (Rating.DISLIKE, "thumb_down", "bg-red-100 text-red-600"),
            ):
                ui.button(
                    icon=icon,
                    on_click=lambda r=rating: rate(conversation_id, msg.id, r),
                ).props("flat dense size=sm").classes(
                    active_css if current is rating else "text-gray-500"
                )

    def render_message_bubble(conversation_id: str, msg: Message) -> None:
        align = "justify-end" if msg.is_user else "justify-start"
        bubble = "message-user" if msg.is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 no-wrap"):
            if not msg.is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[80%] gap-2"):
                with ui.element("div").classes(f"p-4 {bubble}"):
                    if msg.is_user:
                        content = render_plain(msg.content)
                    else:
                        content = render_message(msg.content)
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                    ui.label(format_time(msg.created_at)).classes("text-xs opacity-70 mt-2")
                if not msg.is_user:
                    render_rating_buttons(conversation_id, msg)
            if msg.is_user:
                render_avatar(True)

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant p-4"):
                with ui.row().classes("items-center gap-2"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_sidebar() -> None:
        sidebar_list.clear()
        active_id = session.store.active_conversation_id
        with sidebar_list:
            for summary in session.store.recent_conversations():
                active = " active" if summary.id == active_id else ""
                with (
                    ui.column()
                    .classes(f"w-full p-3 gap-1 sidebar-item{active}")
                    .on("click", lambda _, cid=summary.id: select_conversation(cid))
                ):
                    ui.label(summary.title).classes("text-sm font-medium")
                    ui.label(summary.summary).classes("text-xs opacity-70")
                    with ui.row().classes("items-center gap-1 text-xs opacity-60"):
                        ui.icon("schedule").classes("text-xs")
                        ui.label(
                            f"{format_time(summary.last_updated)} · "
                            f"{summary.message_count} messages"
                        )

    def refresh_messages() -> None:
        conversation = session.store.get_active()
        header_title.set_text(conversation.title if conversation else "New Conversation")
        header_summary.set_text(conversation.summary if conversation else "AI Assistant")

        messages_container.clear()
        with messages_container:
            if conversation is not None:
                for msg in conversation.messages:
                    render_message_bubble(conversation.id, msg)
            if session.is_loading:
                render_typing_indicator()

        if session.is_loading:
            input_field.disable()
            send_btn.disable()
        else:
            input_field.enable()
            send_btn.enable()

    def refresh_chat() -> None:
        refresh_sidebar()
        refresh_messages()

    def select_conversation(conversation_id: str) -> None:
        session.store.set_active(conversation_id)
        refresh_chat()

    def toggle_sidebar() -> None:
        session.sidebar_open = not session.sidebar_open
        sidebar.set_visibility(session.sidebar_open)
        toggle_btn.props(f"icon={'chevron_left' if session.sidebar_open else 'menu'}")

    async def await_reply(conversation_id: str, user_text: str) -> None:
        task = session.replies.start_reply(conversation_id, user_text)
        refresh_chat()
        try:
            await task
        except ReplyTimeoutError as e:
            logger.warning(str(e))
            ui.notify("The assistant did not answer in time", type="negative")
        finally:
            if not task.cancelled():
                refresh_chat()

    async def start_conversation() -> None:
        question = (question_field.value or "").strip()
        if not question:
            return

        logger.info(f"Question submitted: {question!r}")
        conversation_id = session.store.create_conversation(question)
        landing.set_visibility(False)
        chat_view.set_visibility(True)
        await await_reply(conversation_id, question)

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        conversation_id = session.store.active_conversation_id
        if not text or conversation_id is None or session.is_loading:
            return

        input_field.value = ""
        session.store.append_message(conversation_id, Author.USER, text)
        await await_reply(conversation_id, text)

    # === Landing ===
    with ui.element("div").classes(
        "w-full min-h-screen landing flex items-center justify-center p-4"
    ) as landing:
        with ui.column().classes("w-full max-w-2xl items-stretch"):
            with ui.column().classes("w-full items-center mb-8"):
                ui.label(session.config.app_title).classes("text-4xl font-bold mb-4")
                ui.label(
                    "Ask your question and get instant help from our AI assistant"
                ).classes("text-lg text-gray-500")
            with ui.column().classes("w-full card p-8 gap-6"):
                ui.label("What would you like to know?").classes("text-sm font-medium")
                question_field = (
                    ui.textarea(placeholder="Type your question here...")
                    .props("outlined")
                    .classes("w-full text-base")
                )
                ui.button(
                    "Start Conversation", icon="send", on_click=start_conversation
                ).props("unelevated size=lg").classes("w-full").bind_enabled_from(
                    question_field, "value", lambda v: bool(v and v.strip())
                )
            ui.label("Powered by AI • Get instant answers to your questions").classes(
                "w-full text-center mt-6 text-sm text-gray-500"
            )

    # === Chat ===
    with ui.row().classes("w-full h-screen gap-0 no-wrap") as chat_view:
        with ui.column().classes("w-80 h-full sidebar gap-0") as sidebar:
            with ui.row().classes("w-full p-4 border-b items-center justify-between"):
                ui.label("Conversations").classes("font-semibold")
            with ui.scroll_area().classes("flex-grow w-full"):
                sidebar_list = ui.column().classes("w-full p-2 gap-2")

        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.row().classes("w-full bg-white border-b px-4 py-3 items-center gap-3"):
                toggle_btn = ui.button(icon="chevron_left", on_click=toggle_sidebar).props(
                    "flat dense"
                )
                ui.icon("forum").classes("text-indigo-600 text-xl")
                with ui.column().classes("gap-0"):
                    header_title = ui.label("New Conversation").classes("font-semibold")
                    header_summary = ui.label("AI Assistant").classes(
                        "text-sm text-gray-500"
                    )

            with (
                ui.scroll_area().classes("flex-grow w-full"),
                ui.column().classes("w-full p-4"),
            ):
                messages_container = ui.column().classes("w-full gap-4")

            with ui.row().classes("w-full p-4 gap-2 items-center bg-white border-t no-wrap"):
                input_field = (
                    ui.input(placeholder="Type your message...")
                    .props("outlined dense")
                    .classes("flex-grow")
                    .on("keydown.enter", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props("unelevated")

    chat_view.set_visibility(False)


def main() -> None:
    config = get_app_config()
    ui.run(title=config.app_title, port=8080, reload=False)


if __name__ == "__main__":
    main()
