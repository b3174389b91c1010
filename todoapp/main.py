# todoapp/main.py

import logging
import streamlit as st
from dotenv import load_dotenv
from todoapp.ui.login import get_state, login_page, logout, restore_session
from todoapp.ui.todos import todos_page


load_dotenv()

logging.basicConfig(
    format="%(asctime)s — %(name)s — %(levelname)s — %(message)s",
    level=logging.INFO,
)


def main_page():
    state = get_state()
    st.sidebar.markdown(f"## 👋 {state.user['username']}")

    if st.sidebar.button("🔓 Logout"):
        logout()
        st.session_state.pop("todos_loaded_for", None)
        st.rerun()

    todos_page()


restore_session()

if not get_state().is_authenticated:
    login_page()
else:
    main_page()
