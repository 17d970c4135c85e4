"""
Streamlit Frontend for Programme Tracker

The view layer. It only talks to the ProgrammeTracker facade:
- reads collections and statistics to draw pages
- calls actions and shows the notification each one returns
- registers a change listener to show the most recent change

Run with:  streamlit run app/main.py
"""

from datetime import date

import streamlit as st

from programme_tracker.models import (
    BudgetPriority,
    ChangeEvent,
    NotificationLevel,
    PROGRAMME_DISPLAY_NAMES,
    Programme,
    Theme,
    format_programme_name,
)
from programme_tracker.orchestrator import (
    REPORT_KINDS,
    OperationOutcome,
    ProgrammeTracker,
    create_app_components,
)
from programme_tracker.reports import (
    format_date,
    forecast_rows,
    monthly_budget_rows,
    roi_rows,
)
from programme_tracker.stats import performance_class


# Page configuration
st.set_page_config(
    page_title="Programme Tracker",
    page_icon="📋",
    layout="wide",
    initial_sidebar_state="expanded",
)

DARK_MODE_CSS = """
<style>
    .stApp {
        background-color: #1e1f24;
        color: #e8e8e8;
    }
    .high-performance { color: #28a745; font-weight: bold; }
    .medium-performance { color: #ffc107; font-weight: bold; }
    .low-performance { color: #dc3545; font-weight: bold; }
</style>
"""

LIGHT_MODE_CSS = """
<style>
    .high-performance { color: #1e7e34; font-weight: bold; }
    .medium-performance { color: #b38600; font-weight: bold; }
    .low-performance { color: #bd2130; font-weight: bold; }
</style>
"""


@st.cache_resource
def get_tracker() -> ProgrammeTracker:
    """Get or create the tracker (cached for the session's lifetime)."""
    tracker = create_app_components()

    def remember_change(event: ChangeEvent) -> None:
        st.session_state.last_change = (
            f"{event.description} at {event.timestamp:%H:%M:%S} UTC"
        )

    tracker.subscribe(remember_change)
    return tracker


def flash(outcome: OperationOutcome) -> None:
    """Keep an action's notification for the next rerun."""
    st.session_state.flash = outcome.notification


def show_flash() -> None:
    notification = st.session_state.pop("flash", None)
    if notification is None:
        return
    if notification.level == NotificationLevel.ERROR:
        st.error(notification.text)
    elif notification.level == NotificationLevel.WARNING:
        st.warning(notification.text)
    elif notification.level == NotificationLevel.INFO:
        st.info(notification.text)
    else:
        st.success(notification.text)


def as_text(rows: list[dict]) -> list[dict]:
    """Report rows with every cell as a string, for st.table."""
    return [{key: str(value) for key, value in row.items()} for row in rows]


def main():
    """Main application entry point."""
    tracker = get_tracker()

    st.markdown(
        DARK_MODE_CSS if tracker.theme == Theme.DARK else LIGHT_MODE_CSS,
        unsafe_allow_html=True,
    )

    st.sidebar.title("📋 Programme Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "👥 Participants", "💰 Finance", "📄 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    theme_label = "◑ Dark mode" if tracker.theme == Theme.LIGHT else "◐ Light mode"
    if st.sidebar.button(theme_label):
        flash(tracker.toggle_theme())
        st.rerun()
    if st.sidebar.button("🔄 Refresh data"):
        flash(tracker.refresh())
        st.rerun()

    if "last_change" in st.session_state:
        st.sidebar.caption(f"Last change: {st.session_state.last_change}")

    show_flash()

    if page == "📊 Dashboard":
        render_dashboard_page(tracker)
    elif page == "👥 Participants":
        render_participants_page(tracker)
    elif page == "💰 Finance":
        render_finance_page(tracker)
    elif page == "📄 Reports":
        render_reports_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def render_dashboard_page(tracker: ProgrammeTracker):
    st.title("📊 Dashboard")

    stats = tracker.dashboard_stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Participants", stats.participant_count)
    col2.metric("Programmes", stats.program_count)
    col3.metric("Success Rate", f"{stats.success_rate}%")

    st.markdown("### Programme Progress")
    participants = tracker.participants()
    if not participants:
        st.info("No participants yet. Add one on the Participants page.")
        return

    for participant in participants:
        band = performance_class(participant.progress)
        st.markdown(
            f"**{participant.name}** ({format_programme_name(participant.programme)}) "
            f"<span class='{band.value}'>{participant.progress}%</span>",
            unsafe_allow_html=True,
        )
        st.progress(participant.progress / 100)


def render_participants_page(tracker: ProgrammeTracker):
    st.title("👥 Participants")

    with st.expander("➕ Add Participant"):
        with st.form("add_participant", clear_on_submit=True):
            name = st.text_input("Name *")
            email = st.text_input("Email *")
            phone = st.text_input("Phone")
            programme = st.selectbox(
                "Programme *",
                options=[p.value for p in Programme],
                format_func=lambda p: PROGRAMME_DISPLAY_NAMES.get(p, "Custom programme..."),
            )
            custom_programme = st.text_input("Custom programme name")
            start_date = st.date_input("Start date *", value=date.today())
            notes = st.text_area("Notes")

            if st.form_submit_button("Add Participant", type="primary"):
                flash(tracker.add_participant({
                    "name": name,
                    "email": email,
                    "phone": phone,
                    "programme": programme,
                    "customProgramme": custom_programme,
                    "startDate": start_date,
                    "notes": notes,
                }))
                st.rerun()

    participants = tracker.participants()
    if not participants:
        st.info("No participants recorded yet.")
        return

    for participant in participants:
        col1, col2, col3, col4 = st.columns([3, 3, 2, 2])
        col1.markdown(f"**{participant.id}** {participant.name}  \n{participant.email}")
        col2.markdown(
            f"{format_programme_name(participant.programme)}  \n"
            f"Started {format_date(participant.start_date)}"
        )
        col3.markdown(f"{participant.status}  \n{participant.progress}%")
        with col4:
            if not participant.is_completed and st.button("✅ Complete", key=f"done_{participant.id}"):
                flash(tracker.mark_participant_completed(participant.id))
                st.rerun()
            if st.button("🗑️ Remove", key=f"rm_{participant.id}"):
                flash(tracker.remove_participant(participant.id))
                st.rerun()


def render_finance_page(tracker: ProgrammeTracker):
    st.title("💰 Finance")

    col1, col2 = st.columns(2)

    with col1:
        with st.form("add_budget_item", clear_on_submit=True):
            st.markdown("### Add Budget Item")
            category = st.text_input("Category *")
            amount = st.number_input("Amount *", min_value=0.0, step=100.0, format="%.2f")
            priority = st.selectbox("Priority *", options=[p.value for p in BudgetPriority])
            description = st.text_input("Description")
            if st.form_submit_button("Add Budget Item", type="primary"):
                flash(tracker.add_budget_item({
                    "category": category,
                    "amount": amount,
                    "priority": priority,
                    "description": description,
                }))
                st.rerun()

    with col2:
        with st.form("add_expense", clear_on_submit=True):
            st.markdown("### Add Expense")
            budget_categories = [item.category for item in tracker.budget_items()]
            category = st.selectbox("Category *", options=budget_categories or [""])
            amount = st.number_input("Amount *", min_value=0.0, step=10.0, format="%.2f")
            expense_date = st.date_input("Date *", value=date.today())
            description = st.text_input("Description *")
            if st.form_submit_button("Add Expense", type="primary"):
                flash(tracker.add_expense({
                    "category": category,
                    "amount": amount,
                    "date": expense_date,
                    "description": description,
                }))
                st.rerun()

    st.markdown("---")
    st.markdown("### Budget Utilization")
    budget_items = tracker.budget_items()
    expenses = tracker.expenses()

    if budget_items:
        st.table(as_text(monthly_budget_rows(budget_items, expenses)))
        for index, item in enumerate(budget_items):
            if st.button(f"🗑️ Remove {item.category}", key=f"rm_budget_{index}"):
                flash(tracker.remove_budget_item(index))
                st.rerun()
    else:
        st.info("No budget items yet.")

    st.markdown("### Forecast")
    st.table(as_text(forecast_rows(budget_items, expenses)))

    st.markdown("### Expenses")
    if expenses:
        st.table([
            {
                "Id": e.id,
                "Category": e.category,
                "Amount": tracker.format_amount(e.amount),
                "Date": format_date(e.expense_date),
                "Description": e.description,
            }
            for e in expenses
        ])
    else:
        st.info("No expenses recorded yet.")


def render_reports_page(tracker: ProgrammeTracker):
    st.title("📄 Reports")

    st.markdown("### Return on Investment")
    st.table(as_text(roi_rows(tracker.participants(), tracker.budget_items())))

    st.markdown("### Download")
    kind = st.selectbox("Report", options=list(REPORT_KINDS))
    if st.button("Generate report", type="primary"):
        flash(tracker.generate_report(kind))
        st.rerun()

    st.markdown("### Backup")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("💾 Export all data"):
            flash(tracker.export_backup())
            st.rerun()
    with col2:
        backup_path = st.text_input("Backup file to import")
        if st.button("📥 Import backup") and backup_path:
            flash(tracker.import_backup(backup_path))
            st.rerun()


def render_settings_page(tracker: ProgrammeTracker):
    st.title("⚙️ Settings")

    from programme_tracker.config import validate_all_settings

    st.markdown("### Configuration")
    status = validate_all_settings()
    for key in ("storage", "app"):
        if status.get(key, False):
            st.success(f"✅ {key} settings loaded")
        else:
            st.error(f"❌ {key} settings: {status.get(f'{key}_error', 'invalid')}")

    st.markdown(f"**Theme:** {tracker.theme.value}")
    st.markdown(
        "To change where data and exports are kept, create a `.env` file. "
        "See `.env.example` for the available variables."
    )

    st.markdown("---")
    st.markdown("### Danger Zone")
    confirm = st.checkbox("I understand this deletes every record")
    if st.button("🧹 Clear all data", disabled=not confirm):
        flash(tracker.clear_all_data())
        st.rerun()


if __name__ == "__main__":
    main()
