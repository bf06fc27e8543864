"""Streamlit single-page UI for the Sahayak chat."""

import streamlit as st
import os
import sys
import logging

# Ensure project root is on sys.path
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
if project_root not in sys.path:
    sys.path.append(project_root)

from sahayak.chat.conversation import ChatSession
from sahayak.chat.exchange import ExchangeClient
from sahayak.config_manager import ConfigManager
from sahayak.utils.logger import setup_logging

logger = logging.getLogger("SahayakUI")

CONFIG_PATH = os.getenv("SAHAYAK_CONFIG", os.path.join(project_root, "cfg", "config.json"))

# --- PAGE SETUP ---
st.set_page_config(
    page_title="SAHAYAK.AI",
    page_icon="🤖",
    layout="centered"
)

# --- CSS STYLES ---
st.markdown("""
<style>
    .main {
        background: linear-gradient(90deg, #0f172a 0%, #334155 100%);
    }

    h1 {
        text-align: center;
        font-weight: 700;
        border-bottom: 1px solid #d1d5db;
        padding-bottom: 10px;
    }

    .stChatMessage[data-testid="stChatMessageUser"] {
        background-color: #3b82f6;
        color: white;
        border-radius: 12px;
    }

    .stChatMessage[data-testid="stChatMessageAssistant"] {
        background-color: #ffffff;
        color: #1f2937;
        border-radius: 12px;
    }
</style>
""", unsafe_allow_html=True)


# --- INITIALIZATION (SINGLETON) ---
@st.cache_resource
def get_exchange(config_path: str) -> ExchangeClient:
    """Configure logging and build the exchange once per server process."""
    setup_logging(config_path)
    return ExchangeClient.from_config(config_path)

try:
    ConfigManager.load(CONFIG_PATH)
    ui_cfg = ConfigManager.get_ui_config()
    exchange = get_exchange(CONFIG_PATH)
except Exception as e:
    st.error(f"Failed to initialize the chat client: {e}")
    st.stop()

if "chat" not in st.session_state:
    st.session_state.chat = ChatSession()

session: ChatSession = st.session_state.chat
policy = exchange.policy

# --- MAIN UI ---
st.title(ui_cfg.get("title", "SAHAYAK.AI"))

if session.size() == 0:
    st.markdown(f"<h3 style='text-align:center'>{ui_cfg.get('empty_state', 'How can your Sahayak help you?')}</h3>",
                unsafe_allow_html=True)

# Render chat history
for message in session.conversation:
    with st.chat_message(message.role.value):
        st.markdown(message.text)

# Quota display
placeholder = ui_cfg.get("input_placeholder", "Ask a question...")
if policy is not None:
    st.caption(f"Questions remaining today: {exchange.remaining(session)}")
    if policy.is_exhausted(session.size()):
        placeholder = f"Too many questions. Please wait {policy.cooldown_hours} hours."

# Drawn before any pending call so it stays disabled while the reply is awaited
prompt = st.chat_input(placeholder, disabled=not session.is_input_enabled(policy))

if session.pending:
    # Second run of a turn: the user message is already in the history above
    with st.chat_message("assistant"):
        with st.spinner(ui_cfg.get("thinking", "Thinking...")):
            exchange.complete(session, session.conversation.last().text)
    st.rerun()

if prompt and exchange.accept(session, prompt):
    # First run of a turn: record it and redraw with the input disabled
    st.rerun()

if policy is not None and policy.is_exhausted(session.size()):
    st.error(
        "You've reached the maximum number of questions. "
        f"Please try again in {policy.cooldown_hours} hours."
    )
