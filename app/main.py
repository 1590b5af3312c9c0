"""
Streamlit Frontend for budgetwatch

The dashboard is only a client of the stores:
- it renders the current account list and the alerts switch
- every edit goes through an AccountStore or SettingsStore mutator
- the notification sidebar shows whatever the notifier last published

Nothing here computes totals or decides alerts.
"""

import streamlit as st

from budgetwatch.audit import AuditLogger
from budgetwatch.budget import clean_amount_input, format_amount, parse_amount, render_account_line
from budgetwatch.config import validate_all_settings
from budgetwatch.models.budget import Account, AccountField
from budgetwatch.models.notification import NotificationPriority
from budgetwatch.notifier import create_app_components
from budgetwatch.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Budget Manager",
    page_icon="💰",
    layout="centered",
    initial_sidebar_state="expanded",
)

FIELD_LABELS = {
    AccountField.TOTAL_MONEY: "Total Money",
    AccountField.WEEKLY_LIMIT: "Weekly Limit",
    AccountField.SPENT_THIS_WEEK: "Spent This Week",
}


@st.cache_resource
def get_components():
    """Get or create application components (cached for the process)."""
    return create_app_components()


def main():
    """Main application entry point."""
    try:
        account_store, settings_store, _, host = get_components()
    except StorageError as e:
        st.error(f"Failed to open budget data: {e}")
        st.stop()

    render_notifications(host)
    render_settings_status()

    st.title("Budget Manager")
    render_global_actions(account_store)
    render_alerts_switch(settings_store)
    st.markdown("---")
    render_accounts(account_store)


def render_notifications(host):
    """Render the active notifications in the sidebar."""
    st.sidebar.title("🔔 Notifications")
    st.sidebar.markdown("---")

    active = host.active()
    if not active:
        st.sidebar.caption("No notifications")
        return

    for notification in active:
        text = f"**{notification.title}**\n\n{notification.body}"
        if notification.priority is NotificationPriority.HIGH:
            st.sidebar.warning(text, icon="⚠️")
        else:
            st.sidebar.info(text)


def render_settings_status():
    """Show which configuration groups loaded."""
    status = validate_all_settings()

    with st.sidebar.expander("⚙️ Configuration"):
        for key in ("storage", "alerts", "notifications", "app"):
            if status.get(key, False):
                st.success(f"✅ {key}")
            else:
                st.error(f"❌ {key} - {status.get(f'{key}_error', 'invalid')}")


def render_global_actions(account_store):
    """Set one amount on every account at once."""
    columns = st.columns(len(FIELD_LABELS))
    for column, (field, label) in zip(columns, FIELD_LABELS.items()):
        with column:
            with st.popover(f"Set {label}"):
                with st.form(f"set_all_{field.value}", clear_on_submit=True):
                    raw = st.text_input(f"{label} (all)")
                    if st.form_submit_button("Apply"):
                        value = parse_amount(clean_amount_input(raw))
                        run_mutation(account_store.set_all_field, field, value)


def render_alerts_switch(settings_store):
    st.toggle(
        "Alerts",
        value=settings_store.is_alerts_enabled(),
        key="alerts_enabled",
        on_change=lambda: run_mutation(
            settings_store.set_alerts_enabled,
            st.session_state.alerts_enabled,
        ),
    )


def render_accounts(account_store):
    """Render the account list with inline edit forms."""
    st.subheader("Accounts")

    accounts = account_store.list_accounts()
    if not accounts:
        st.caption("No accounts yet.")

    for account in accounts:
        with st.container(border=True):
            st.markdown(f"**{account.name}**")
            st.text(render_account_line(account))
            with st.expander("Edit"):
                render_edit_form(account_store, account)

    if st.button("Add Account"):
        run_mutation(account_store.add_account)
        st.rerun()


def render_edit_form(account_store, account: Account):
    with st.form(f"edit_{account.id}"):
        name = st.text_input("Name", value=account.name)
        total = st.text_input("Total Money", value=format_amount(account.total_money))
        limit = st.text_input("Weekly Limit", value=format_amount(account.weekly_limit))
        spent = st.text_input("Spent This Week", value=format_amount(account.spent_this_week))

        if st.form_submit_button("Save"):
            updated = account.model_copy(update={
                "name": name,
                "total_money": parse_amount(clean_amount_input(total)),
                "weekly_limit": parse_amount(clean_amount_input(limit)),
                "spent_this_week": parse_amount(clean_amount_input(spent)),
            })
            run_mutation(account_store.save, updated)
            st.rerun()


def run_mutation(mutator, *args):
    """Call a store mutator, showing storage failures instead of crashing."""
    try:
        return mutator(*args)
    except StorageError as e:
        AuditLogger().log_error(
            error_type="storage",
            error_message=str(e),
            details={"operation": getattr(mutator, "__name__", str(mutator))},
        )
        st.error(f"Could not save your change: {e}")
        return None


if __name__ == "__main__":
    main()
