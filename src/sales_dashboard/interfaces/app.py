# src/sales_dashboard/interfaces/app.py
# Streamlit UI for the sales dashboard
# - Dashboard: date range + time-of-day filters, metrics, daily sales chart, recent sales
# - Manage Sales: single sale, bulk batch, notifications, reset
#
# Run with: streamlit run src/sales_dashboard/interfaces/app.py

from __future__ import annotations

from datetime import date, datetime

import streamlit as st

from sales_dashboard.common.config import Settings, format_money
from sales_dashboard.common.logging_config import setup_logging
from sales_dashboard.domain.models import Status, TimeOfDay
from sales_dashboard.services.controller import DashboardController
from sales_dashboard.services.notifications import NotificationError, NotificationService
from sales_dashboard.services.reporter import (
    daily_frame,
    default_date_range,
    greeting,
    recent_transactions,
    transactions_frame,
)
from sales_dashboard.services.validation import InputError


# -----------------------------
# Page config
# -----------------------------
settings = Settings.from_env()
logger = setup_logging("sales_dashboard.app", settings.log_level)

st.set_page_config(page_title=settings.app_name, layout="wide")
st.title(f"🛍️ {settings.app_name}")


class ToastNotifier:
    """Streamlit has no native OS notifications; a toast is the closest thing."""

    def notify(self, title: str, body: str, icon: bytes | None = None) -> None:
        st.toast(f"**{title}**\n\n{body}", icon="🔔")
        if icon:
            st.image(icon, width=96)


# -----------------------------
# Session state
# -----------------------------
if "controller" not in st.session_state:
    st.session_state["controller"] = DashboardController(settings=settings)
if "notifications" not in st.session_state:
    st.session_state["notifications"] = NotificationService(ToastNotifier(), title=settings.app_name)

controller: DashboardController = st.session_state["controller"]
notifications: NotificationService = st.session_state["notifications"]


def _show_input_error(e: InputError, prefix: str):
    st.error(prefix + "\n\n" + "\n".join(f"- {m}" for m in e.messages))


def _done(message: str):
    # Rerun so the dashboard above is rendered from the new dataset
    st.session_state["flash"] = message
    st.rerun()


flash = st.session_state.pop("flash", None)
if flash:
    st.success(flash)


tab_dash, tab_manage = st.tabs(["📊 Dashboard", "🧾 Manage Sales"])


# -----------------------------
# Dashboard tab
# -----------------------------
with tab_dash:
    st.subheader(greeting(datetime.now().hour))

    # The range follows the data: any new dataset resets it to the span of its sales
    if st.session_state.get("range_dataset") is not controller.dataset:
        st.session_state["start_date"], st.session_state["end_date"] = default_date_range(controller.dataset)
        st.session_state["range_dataset"] = controller.dataset

    c1, c2, c3 = st.columns([1, 1, 2])
    with c1:
        start_date = st.date_input("From", key="start_date")
    with c2:
        end_date = st.date_input("To", key="end_date")
    with c3:
        selected_times = st.multiselect(
            "Time of day",
            options=list(TimeOfDay),
            format_func=lambda t: t.value,
            help="Leave empty to include every hour.",
        )

    result = controller.report(start_date, end_date, selected_times)

    if start_date and end_date and start_date > end_date:
        st.warning("Start date is after end date; nothing to show.")

    # Metrics
    colm1, colm2, colm3, colm4 = st.columns(4)
    colm1.metric("Total sales", format_money(result.total_sales, settings.currency))
    colm2.metric("Transactions", result.total_transactions_count)
    colm3.metric("Approved", result.approved_transactions_count)
    colm4.metric("Conversion", f"{result.conversion_rate}%")

    st.divider()

    st.subheader("📈 Sales overview")
    df_daily = daily_frame(result)
    if df_daily.empty:
        st.info("No days in the selected range.")
    else:
        st.area_chart(df_daily["sales"], height=300)

    st.subheader("🕒 Recent transactions")
    df_recent = transactions_frame(recent_transactions(result, settings.recent_limit))
    if df_recent.empty:
        st.info("No transactions found for the selected window/filters.")
    else:
        st.dataframe(df_recent[["date", "product", "amount", "status"]], width="stretch", hide_index=True)


# -----------------------------
# Manage Sales tab
# -----------------------------
with tab_manage:
    st.subheader("Add a single sale")

    with st.form("add_single_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        with c1:
            f_product = st.text_input("Product name", placeholder="e.g. Vitamin C Serum", key="f_product")
            f_status = st.selectbox("Status", list(Status), format_func=lambda s: s.value, key="f_status")
        with c2:
            f_amount = st.text_input("Amount", placeholder="e.g. 199.90", key="f_amount")
            f_date = st.date_input("Sale date", value=date.today(), key="f_date")
        submitted_single = st.form_submit_button("Add sale")

    if submitted_single:
        try:
            controller.add_transaction(f_product, f_amount, f_status, f_date)
        except InputError as e:
            _show_input_error(e, "Please fill in every field correctly.")
        else:
            _done("Sale added.")

    st.divider()
    st.subheader("Add sales in bulk")

    with st.form("add_batch_form"):
        c1, c2 = st.columns(2)
        with c1:
            b_product = st.text_input("Product name", placeholder="e.g. Sunscreen SPF 50", key="b_product")
            b_amount = st.text_input("Unit amount", placeholder="e.g. 89.90", key="b_amount")
        with c2:
            b_date = st.date_input("Sales date", value=date.today(), key="b_date")
            b_quantity = st.number_input("Quantity", min_value=1, value=1, step=1, key="b_quantity")
        b_randomize = st.toggle("Randomize status", value=False, key="b_randomize")
        b_rate = st.number_input(
            "Approval rate (%)", min_value=0.0, max_value=100.0, value=90.0, step=1.0, key="b_rate",
            help="Each sale is approved with this probability; the rest stay pending.",
        )
        submitted_batch = st.form_submit_button("Add batch")

    if submitted_batch:
        try:
            controller.add_batch(b_product, b_amount, int(b_quantity), b_date, b_randomize, b_rate)
        except InputError as e:
            _show_input_error(e, "Please fill in every batch field correctly.")
        else:
            _done(f"{int(b_quantity)} sales added.")

    st.divider()
    st.subheader("Notifications")

    notifications.enabled = st.toggle("Enable notifications", value=notifications.enabled)
    n_message = st.text_area(
        "Notification message",
        placeholder="e.g. Summer sale! Up to 50% off!",
        disabled=not notifications.enabled,
    )
    n_image = st.file_uploader(
        "Notification image (optional)", type=["png", "jpg", "jpeg", "gif"], disabled=not notifications.enabled,
    )
    if n_image is not None:
        st.image(n_image.getvalue(), caption="Preview", width=120)

    if st.button("Send notification", disabled=not notifications.enabled):
        try:
            notifications.send(n_message, n_image.getvalue() if n_image is not None else None)
            st.success("Notification sent.")
        except InputError as e:
            _show_input_error(e, "Write a message for the notification.")
        except NotificationError as e:
            st.error(str(e))

    st.divider()
    st.subheader("Data management")

    keep_sample = st.checkbox("Reset with sample data", value=settings.sample_data)
    if st.button("🗑️ Reset data", type="secondary"):
        controller.reset(with_sample_data=keep_sample)
        _done("Data reset.")
