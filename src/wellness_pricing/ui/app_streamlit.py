"""
Streamlit UI for the Wellness Pricing Calculator.

Features:
- Single-event calculator with presets
- Multi-day / multi-location editor with per-location breakdown
- Saved calculation history with recalculate
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from wellness_pricing.config.settings import get_settings
from wellness_pricing.engine import CalculationInput, PricingEngine, ResultCache
from wellness_pricing.engine.errors import PricingError
from wellness_pricing.engine.formatting import format_currency, format_percentage
from wellness_pricing.services.history_service import CalculationHistory


st.set_page_config(
    page_title="Wellness Pricing Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    settings = get_settings()
    return PricingEngine(cache=ResultCache(settings.cache_ttl_seconds), settings=settings)


@st.cache_resource
def get_history():
    """Get cached history store."""
    settings = get_settings()
    return CalculationHistory(get_engine(), settings.history_path, settings.max_history_entries)


engine = get_engine()
history = get_history()


def show_result(result):
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Appointments", result.total_appointments)
    m2.metric("Customer Cost", format_currency(result.customer_total_cost))
    m3.metric("Net Profit", format_currency(result.net_profit))
    m4.metric("Margin", format_percentage(result.profit_margin_percent))

    c1, c2, c3 = st.columns(3)
    c1.caption(f"**Appts / pro / hour:** {result.appts_per_pro_per_hour}")
    c2.caption(f"**Professional revenue:** {format_currency(result.professional_revenue)}")
    c3.caption(f"**Annualized:** {format_currency(result.annualized_cost)}")

    with st.expander("🔍 Calculation Details"):
        for t in result.trace:
            if t.value:
                st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
            else:
                st.caption(f"**{t.step}**: {t.description}")


# ============================================================================
# SIDEBAR: Service & Preset
# ============================================================================
with st.sidebar:
    st.header("💆 Service")
    service_type = st.selectbox("Service Type", engine.registry.names(), key="service_type")
    selected = engine.registry.get(service_type)
    retouching = selected.requires_retouching

    presets = engine.list_presets(service_type)
    preset_names = ["Custom"] + [p.name for p in presets]
    preset_choice = st.radio("Preset", preset_names, key="preset")
    preset = next((p for p in presets if p.name == preset_choice), None)
    if preset:
        st.caption(preset.description)

    st.divider()
    st.caption(f"Margin: {format_percentage(selected.margin)}")


defaults = preset.to_input() if preset else CalculationInput(
    service_type=service_type,
    total_hours=4,
    appointment_minutes=20,
    num_professionals=2,
    professional_hourly_rate=400 if retouching else 50,
    customer_hourly_rate=None if retouching else 135,
)


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title("Wellness Pricing Calculator")
st.caption(f"v1.0 | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2, tab3 = st.tabs(["⚡ Single Event", "📅 Multi-Day", "🗂️ History"])


# ============================================================================
# TAB 1: SINGLE EVENT
# ============================================================================
with tab1:
    col1, col2 = st.columns([1.2, 1.8], gap="large")

    with col1:
        with st.container(border=True):
            total_hours = st.number_input("Total Hours", min_value=0.5, value=float(defaults.total_hours), step=0.5)
            appointment_minutes = st.number_input("Appointment Minutes", min_value=1.0,
                                                  value=float(defaults.appointment_minutes), step=1.0)
            num_professionals = st.number_input("Professionals", min_value=1,
                                                value=int(defaults.num_professionals), step=1)
            professional_hourly_rate = st.number_input("Professional Hourly Rate ($)", min_value=1.0,
                                                       value=float(defaults.professional_hourly_rate))
            if retouching:
                retouching_cost = st.number_input("Retouching Cost per Appointment ($)", min_value=0.0,
                                                  value=float(defaults.retouching_cost_per_appointment))
                customer_hourly_rate, early_arrival_fee = None, 0.0
            else:
                customer_hourly_rate = st.number_input("Customer Hourly Rate ($)", min_value=1.0,
                                                       value=float(defaults.customer_hourly_rate or 135))
                early_arrival_fee = st.number_input("Early Arrival Fee ($)", min_value=0.0,
                                                    value=float(defaults.early_arrival_fee))
                retouching_cost = defaults.retouching_cost_per_appointment
            discount_percent = st.number_input("Discount (%)", min_value=0.0, max_value=100.0, value=0.0)
            events_per_year = st.number_input("Events per Year", min_value=1,
                                              value=get_settings().default_events_per_year, step=1)
            client_name = st.text_input("Client Name (for history)")

    params = CalculationInput(
        service_type=service_type,
        total_hours=total_hours,
        appointment_minutes=appointment_minutes,
        num_professionals=int(num_professionals),
        professional_hourly_rate=professional_hourly_rate,
        customer_hourly_rate=customer_hourly_rate,
        early_arrival_fee=early_arrival_fee,
        retouching_cost_per_appointment=retouching_cost,
        discount_percent=discount_percent,
        events_per_year=int(events_per_year),
    )

    with col2:
        st.subheader("Results")
        try:
            result = engine.calculate(params)
        except PricingError as e:
            st.error(f"{e.code}: {e.message}")
            result = None

        if result:
            with st.container(border=True):
                show_result(result)
            if st.button("💾 Save to History", type="primary"):
                history.save(params, result, client_name=client_name or None)
                st.toast("Saved")


# ============================================================================
# TAB 2: MULTI-DAY
# ============================================================================
with tab2:
    st.subheader("📅 Days & Locations")
    st.caption("Each row is one day/location. Blank labels default to Day N / Location N.")

    if 'multi_rows' not in st.session_state:
        st.session_state.multi_rows = pd.DataFrame([{
            'day': '', 'location': '',
            'total_hours': float(defaults.total_hours),
            'appointment_minutes': float(defaults.appointment_minutes),
            'num_professionals': int(defaults.num_professionals),
            'professional_hourly_rate': float(defaults.professional_hourly_rate),
            'customer_hourly_rate': defaults.customer_hourly_rate,
            'early_arrival_fee': float(defaults.early_arrival_fee),
            'discount_percent': 0.0,
        }])

    edited_df = st.data_editor(
        st.session_state.multi_rows,
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        key="multi_editor",
    )
    multi_events = st.number_input("Events per Year", min_value=1, value=12, step=1, key="multi_events")

    if st.button("Calculate All", type="primary"):
        try:
            configurations = [
                CalculationInput(
                    service_type=service_type,
                    total_hours=float(row['total_hours']),
                    appointment_minutes=float(row['appointment_minutes']),
                    num_professionals=int(row['num_professionals']),
                    professional_hourly_rate=float(row['professional_hourly_rate']),
                    customer_hourly_rate=None if pd.isna(row['customer_hourly_rate']) else float(row['customer_hourly_rate']),
                    early_arrival_fee=float(row['early_arrival_fee']),
                    discount_percent=float(row['discount_percent']),
                    day=row["day"] if isinstance(row["day"], str) and row["day"] else None,
                    location=row["location"] if isinstance(row["location"], str) and row["location"] else None,
                )
                for _, row in edited_df.iterrows()
            ]
            aggregate = engine.calculate_multiple(configurations, events_per_year=int(multi_events))
        except PricingError as e:
            st.error(f"{e.code}: {e.message}")
        else:
            m1, m2, m3, m4 = st.columns(4)
            m1.metric("Appointments", aggregate.total_appointments)
            m2.metric("Customer Cost", format_currency(aggregate.customer_total_cost))
            m3.metric("Net Profit", format_currency(aggregate.net_profit))
            m4.metric("Margin", format_percentage(aggregate.profit_margin_percent))
            st.caption(f"**Annualized:** {format_currency(aggregate.annualized_cost)}")

            st.markdown("##### By Day")
            st.dataframe(aggregate.to_frame(), use_container_width=True, hide_index=True)
            st.markdown("##### By Location")
            st.dataframe(aggregate.location_frame(), use_container_width=True)


# ============================================================================
# TAB 3: HISTORY
# ============================================================================
with tab3:
    st.subheader("🗂️ Saved Calculations")
    df = history.to_frame()
    if df.empty:
        st.info("No saved calculations yet.")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)
        entry_id = st.selectbox("Entry", df['entry_id'].tolist())
        c1, c2 = st.columns(2)
        with c1:
            if st.button("🔄 Recalculate", use_container_width=True):
                history.recalculate(entry_id)
                st.rerun()
        with c2:
            if st.button("🗑️ Delete", use_container_width=True):
                history.delete(entry_id)
                st.rerun()
        st.download_button(
            "📥 CSV",
            data=df.to_csv(index=False),
            file_name="calculations.csv",
            mime="text/csv",
        )
