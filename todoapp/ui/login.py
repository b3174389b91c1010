# todoapp/ui/login.py

import os
import json
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from todoapp.core.state import AppState, set_notice, sign_in, sign_out
from todoapp.services.api import is_error, login_user, register_user, reset_password

load_dotenv()

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD", "dev-cookie-password")

cookies = EncryptedCookieManager(prefix="todoapp/", password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def get_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state["app_state"] = AppState()
    return st.session_state["app_state"]


def set_state(state: AppState):
    st.session_state["app_state"] = state


def restore_session():
    """
    Signs the user back in from the cookie, if one was saved on an earlier visit.
    """
    state = get_state()
    if state.is_authenticated:
        return
    token = cookies.get("token")
    user_json = cookies.get("user")
    if not token or not user_json:
        return
    try:
        user = json.loads(user_json)
    except ValueError:
        user = None
    if isinstance(user, dict):
        set_state(sign_in(state, token, user))


def logout():
    cookies["token"] = ""
    cookies["user"] = ""
    cookies.save()
    set_state(sign_out(get_state()))


def login_page():
    st.title("🔐 Login")

    if "auth_view" not in st.session_state:
        st.session_state["auth_view"] = "login"

    view = st.session_state["auth_view"]
    if view == "register":
        show_register_form()
    elif view == "reset":
        show_reset_form()
    else:
        show_login_form()

    state = get_state()
    if state.notice:
        st.success(state.notice)
    if state.error:
        st.error(state.error)


def _switch_view(view):
    st.session_state["auth_view"] = view
    set_state(AppState())
    st.rerun()


def show_login_form():
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login")

    if submitted:
        with st.spinner("Logging in..."):
            result = login_user(username, password)
        if is_error(result):
            set_state(AppState(error=result["error"]))
        else:
            cookies["token"] = result["token"]
            cookies["user"] = json.dumps(result["user"])
            cookies.save()
            set_state(sign_in(get_state(), result["token"], result["user"]))
            st.rerun()

    cols = st.columns(2)
    with cols[0]:
        if st.button("Create an account"):
            _switch_view("register")
    with cols[1]:
        if st.button("Forgot password?"):
            _switch_view("reset")


def show_register_form():
    st.subheader("📝 Register")

    with st.form("register_form"):
        new_user = st.text_input("Username", key="register_username")
        new_pass = st.text_input("Password", type="password", key="register_password")
        recovery = st.text_input(
            "Recovery phrase",
            type="password",
            key="register_recovery",
            help="Used to reset your password if you forget it.",
        )
        submitted = st.form_submit_button("Register")

    if submitted:
        with st.spinner("Registering..."):
            result = register_user(new_user, new_pass, recovery)
        if is_error(result):
            set_state(AppState(error=result["error"]))
        else:
            st.session_state["auth_view"] = "login"
            set_state(set_notice(AppState(), "🎉 Registration successful! Please login."))
            st.rerun()

    if st.button("← Back to login"):
        _switch_view("login")


def show_reset_form():
    st.subheader("🔑 Reset password")

    with st.form("reset_form"):
        username = st.text_input("Username", key="reset_username")
        recovery = st.text_input("Recovery phrase", type="password", key="reset_recovery")
        new_pass = st.text_input("New password", type="password", key="reset_password")
        submitted = st.form_submit_button("Reset password")

    if submitted:
        result = reset_password(username, recovery, new_pass)
        if is_error(result):
            set_state(AppState(error=result["error"]))
        else:
            st.session_state["auth_view"] = "login"
            set_state(set_notice(AppState(), "Password reset successful! Please login with your new password."))
            st.rerun()

    if st.button("← Back to login"):
        _switch_view("login")
