"""NiceGUI chat interface for the Gemini chat endpoint."""

import os

from fastapi import Request
from nicegui import ui

from gemini_chat.ui.session import ChatRequestError, ChatSession, request_chat_reply

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;800&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body {
        min-height: 100vh;
        color: #e9ecf5;
        background:
            radial-gradient(1200px 800px at 20% 10%, rgba(124, 58, 237, 0.22), transparent 60%),
            radial-gradient(1000px 700px at 80% 20%, rgba(59, 130, 246, 0.20), transparent 55%),
            linear-gradient(180deg, #0b1020 0%, #0a0f1d 55%, #070b14 100%);
    }

    .app-container {
        background: rgba(255, 255, 255, 0.06);
        border: 1px solid rgba(255, 255, 255, 0.12);
        border-radius: 22px;
        box-shadow: 0 24px 70px rgba(0, 0, 0, 0.45);
        overflow: hidden;
    }

    .header { border-bottom: 1px solid rgba(255, 255, 255, 0.10); }

    .logo {
        background: linear-gradient(135deg, #ec4899 0%, #7c3aed 35%, #3b82f6 100%);
        color: #0b1020;
    }

    .message-user {
        background: linear-gradient(135deg, #ec4899 0%, #7c3aed 40%, #3b82f6 100%);
        color: #0b1020;
        border-radius: 18px 10px 18px 18px;
    }

    .message-assistant {
        background: rgba(255, 255, 255, 0.08);
        color: rgba(233, 236, 245, 0.95);
        border-radius: 10px 18px 18px 18px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: rgba(233, 236, 245, 0.75);
        border-radius: 50%;
        animation: pulse 1s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 140ms; }
    .typing-dot:nth-child(3) { animation-delay: 280ms; }

    @keyframes pulse {
        0%, 100% { transform: translateY(0); opacity: .55; }
        50% { transform: translateY(-3px); opacity: 1; }
    }

    .send-btn {
        background: linear-gradient(135deg, #10b981 0%, #3b82f6 60%, #7c3aed 100%) !important;
    }
</style>
"""


def _client_address(request: Request) -> str | None:
    """Return the browser's address as seen by the page."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for
    return request.client.host if request.client else None


@ui.page("/")
def chat_page(request: Request) -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    client_address = _client_address(request)

    messages_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.input
    send_btn: ui.button
    clear_btn: ui.button

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[78%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.label(msg["content"]).classes(
                        "text-sm leading-relaxed whitespace-pre-wrap"
                    )
                ui.label(msg["time"]).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-2 items-center").props('aria-label="Assistant typing"'):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for msg in session.messages:
                render_message(msg)
            if session.is_loading:
                render_typing_indicator()
        scroll_area.scroll_to(percent=1.0)

    def set_controls_enabled(enabled: bool) -> None:
        for control in (input_field, send_btn, clear_btn):
            if enabled:
                control.enable()
            else:
                control.disable()

    async def send_message() -> None:
        conversation = session.begin_turn(input_field.value or "")
        if conversation is None:
            return

        input_field.value = ""
        set_controls_enabled(False)
        refresh_messages()

        try:
            reply = await request_chat_reply(conversation, client_address=client_address)
        except ChatRequestError as e:
            session.fail_turn(e.detail)
            ui.notify(e.detail, type="negative")
        else:
            session.complete_turn(reply)
        finally:
            set_controls_enabled(True)
            refresh_messages()
            input_field.run_method("focus")

    def clear_chat() -> None:
        session.clear()
        refresh_messages()
        input_field.run_method("focus")

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container gap-0").style(
            "height: min(82vh, 760px)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                with ui.element("div").classes(
                    "logo w-10 h-10 rounded-xl flex items-center justify-center font-extrabold"
                ):
                    ui.label("✦")
                with ui.column().classes("gap-0"):
                    ui.label("Gemini Chat").classes("text-lg font-extrabold")
                    ui.label("A simple, vibrant chatbot").classes("text-xs text-gray-400")
            clear_btn = (
                ui.button("Clear", on_click=clear_chat)
                .props("flat no-caps color=white")
                .tooltip("Clear conversation")
            )

        # Messages
        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            messages_container = ui.column().classes("w-full p-5 gap-3")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-center no-wrap"):
            input_field = (
                ui.input(placeholder="Message Gemini…")
                .props("outlined dense dark rounded")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = (
                ui.button("Send", icon="send", on_click=send_message)
                .props("unelevated rounded no-caps")
                .classes("send-btn")
            )
        with ui.row().classes("w-full px-4 pb-3 gap-2"):
            ui.label("Tip: Press Enter to send").classes("text-xs text-gray-400")

    refresh_messages()


def main() -> None:
    """Serve the page on its own, talking to the API at get_api_base_url()."""
    ui.run(title="Gemini Chat", port=int(os.getenv("UI_PORT", "8080")), reload=False)


if __name__ == "__main__":
    main()
