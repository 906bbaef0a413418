import random

import streamlit as st

# --- Imports from the package ---
from college_bot.config import SMALL_TALK_PHRASES, settings
from college_bot.data_store import IntentStoreError
from college_bot.engine import create_engine
from college_bot.eval_utils import run_offline_eval
from college_bot.logging import configure_logging
from college_bot.sessions import SessionStore

configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
st.set_page_config(page_title="RVR & JC College Chatbot", layout="centered")


# --- Engine: intents + lexicon + scorers, built once per process ----
@st.cache_resource(show_spinner="Loading chatbot data...")
def _load_engine():
    return create_engine(settings)


# --- Session store shared by every browser session ----
@st.cache_resource
def _session_store():
    return SessionStore()


def get_suggestions(engine, limit=5):
    """Pick one keyword per topic intent to show as example questions."""
    per_intent = [
        intent.keywords[0]
        for intent in engine.context.store
        if intent.name not in SMALL_TALK_PHRASES and intent.keywords
    ]
    if not per_intent:
        return []
    return random.sample(per_intent, k=min(limit, len(per_intent)))


def render_links(links):
    if links:
        st.markdown("\n".join(f"* [{link.text}]({link.url})" for link in links))


try:
    engine = _load_engine()
except IntentStoreError as e:
    st.error(f"Failed to load chatbot data: {e}")
    st.stop()

sessions = _session_store()

# --- Streamlit UI ---------
st.title("RVR & JC College Chatbot")
st.subheader("Ask about departments, admissions, fees, placements and campus life")

if 'session_id' not in st.session_state:
    st.session_state['session_id'] = sessions.new_session_id()
if 'suggestions' not in st.session_state:
    st.session_state['suggestions'] = get_suggestions(engine)
if 'links' not in st.session_state:
    st.session_state['links'] = {}

session_id = st.session_state['session_id']
history = sessions.history(session_id)

with st.sidebar:
    if st.button("New conversation"):
        sessions.clear(session_id)
        st.session_state['session_id'] = sessions.new_session_id()
        st.session_state['links'] = {}
        st.rerun()

    if st.button("Run offline evaluation"):
        with st.spinner("Evaluating intents..."):
            accuracy, results = run_offline_eval(engine)
        st.metric("Keyword accuracy", f"{accuracy:.1%}")
        misses = [r for r in results if not r["ok"]]
        if misses:
            st.dataframe(misses)

suggestions = st.session_state['suggestions']
if suggestions and not history:
    st.markdown("**Try asking:**")
    st.markdown("\n".join(f"* {s}" for s in suggestions))

# Display conversation history
for index, exchange in enumerate(history):
    role = "user" if exchange.sender == "user" else "assistant"
    with st.chat_message(role, avatar=None):
        st.write(exchange.message)
        render_links(st.session_state['links'].get(index))

# Input
user_prompt = st.chat_input("Ask something about the college...")

if user_prompt:
    with st.chat_message("user", avatar=None):
        st.write(user_prompt)

    # the engine only reads history; this page owns every append
    reply = engine.handle(user_prompt, list(history))
    sessions.record_turn(session_id, user_prompt, reply)
    st.session_state['links'][len(sessions.history(session_id)) - 1] = reply.links

    with st.chat_message("assistant", avatar=None):
        st.write(reply.text)
        render_links(reply.links)
