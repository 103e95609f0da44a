"""NiceGUI chat interface streaming replies from the relay."""

import os

import httpx
from nicegui import ui

from streamchat.conversation import ConversationController, ConversationState
from streamchat.models.schemas import Message, Role

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
DEFAULT_PROMPT = "How can I build a chatbot in Python?"
# Plain Enter submits; Shift+Enter falls through and inserts a newline
SUBMIT_EVENT = "keydown.enter.exact.prevent"
PROMPT_PROPS = "autogrow autofocus borderless dense dark rows=1"

CUSTOM_CSS = """
<style>
    body { background: #111827; min-height: 100vh; }

    .app-container { max-width: 48rem; }

    .message-bubble {
        background: #1f2937;
        color: #f9fafb;
        border-radius: 6px;
        min-height: 60px;
        font-family: 'Menlo', 'Monaco', monospace;
        font-size: 0.875rem;
    }

    .input-box {
        background: #1f2937;
        border: 1px solid #4b5563;
        border-radius: 6px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #4f46e5; }

    .message-bubble pre { margin: 0.5rem 0; }
    .message-bubble a { color: #818cf8; }
</style>
"""


def _relay_client() -> httpx.AsyncClient:
    # No read timeout: a slow provider should not cut the stream.
    return httpx.AsyncClient(base_url=API_BASE_URL, timeout=httpx.Timeout(10.0, read=None))


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    ui.dark_mode().enable()

    client = _relay_client()
    controller = ConversationController(client, auth_token=os.getenv("RELAY_API_KEY", ""))

    messages_container: ui.column
    answer_view: ui.markdown | None = None
    rendered_count = 0

    def render_message(msg: Message) -> ui.markdown | None:
        is_ai = msg.role is Role.AI
        icon = "bolt" if is_ai else "account_circle"
        with ui.row().classes("w-full items-start no-wrap gap-2"):
            ui.icon(icon).classes("text-4xl text-gray-300")
            with ui.element("div").classes("message-bubble w-full px-4 py-2"):
                if is_ai:
                    return ui.markdown(msg.text)
                ui.label(msg.text).classes("whitespace-pre-wrap")
        return None

    def refresh_messages(state: ConversationState) -> None:
        nonlocal answer_view, rendered_count
        messages_container.clear()
        answer_view = None
        with messages_container:
            if not state.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-500")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
            for msg in state.messages:
                answer_view = render_message(msg)
        rendered_count = len(state.messages)

    def on_state(state: ConversationState) -> None:
        if len(state.messages) != rendered_count or answer_view is None:
            refresh_messages(state)
        else:
            answer_view.set_content(state.messages[-1].text)

        busy = state.assistant_thinking or state.is_writing
        stop_row.set_visibility(busy)
        send_btn.set_visibility(not busy)
        spinner.set_visibility(busy)

    def send_message() -> None:
        text = input_field.value or ""
        if text and controller.submit(text) is not None:
            input_field.value = ""

    async def close_client() -> None:
        controller.cancel()
        await client.aclose()

    # === UI Layout ===
    with ui.column().classes("w-full app-container mx-auto min-h-screen p-4 gap-4"):
        with ui.scroll_area().classes("flex-grow w-full").style("height: calc(100vh - 12rem)"):
            messages_container = ui.column().classes("w-full gap-4")

        with ui.row().classes("w-full justify-center") as stop_row:
            ui.button("Stop generating", on_click=controller.cancel).props(
                "dense no-caps color=indigo-1 text-color=indigo-8"
            )

        with ui.row().classes("w-full input-box px-3 py-2 items-center no-wrap"):
            input_field = (
                ui.textarea(value=DEFAULT_PROMPT, placeholder=DEFAULT_PROMPT)
                .props(PROMPT_PROPS)
                .classes("flex-grow")
                .on(SUBMIT_EVENT, send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("flat round dense")
            spinner = ui.spinner(size="sm")
            ui.button(icon="add", on_click=controller.reset).props("flat round dense")

    controller.subscribe(on_state)
    on_state(controller.state)
    ui.context.client.on_disconnect(close_client)


def main() -> None:
    ui.run(title="StreamChat", port=8080, reload=False)


if __name__ == "__main__":
    main()
