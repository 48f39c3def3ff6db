import pandas as pd
import streamlit as st

from range_scanner.batch import Success
from range_scanner.config import load_config_bundle
from range_scanner.errors import EmptyInputError
from range_scanner.reports import COLUMNS, EXAMPLE_TICKERS, build_rows, last_updated, status_message
from range_scanner.scanner import build_aggregator

st.set_page_config(page_title="52-Week Range Scanner", layout="wide", page_icon="📈")

st.title("52-Week Range Scanner")

config = load_config_bundle()


@st.cache_resource
def get_aggregator(provider_id: str):
    # Cached so the rate limiter's counter survives reruns of the page.
    return build_aggregator(config, provider_id)


# --- Sidebar: Provider Selection ---
provider_ids = [p.id for p in config.providers]
default_index = provider_ids.index(config.batch.default_provider) if config.batch.default_provider in provider_ids else 0
provider_id = st.sidebar.selectbox("Data provider", options=provider_ids, index=default_index)
limits = config.provider(provider_id).rate_limit
if limits.budget is not None:
    st.sidebar.caption(f"Budget: {limits.budget} requests per {limits.window_ms // 1000}s ({limits.mode.value})")

# --- Input ---
if "tickers" not in st.session_state:
    st.session_state["tickers"] = ""

example_cols = st.columns(len(EXAMPLE_TICKERS))
for col, (label, tickers) in zip(example_cols, EXAMPLE_TICKERS.items()):
    if col.button(label):
        st.session_state["tickers"] = tickers

# A form so pressing Enter in the input submits the fetch.
with st.form("fetch_form"):
    raw_input = st.text_input("Ticker symbols (comma separated)", key="tickers")
    submitted = st.form_submit_button("Fetch Stock Data", type="primary")

if submitted:
    aggregator = get_aggregator(provider_id)
    try:
        with st.spinner("Fetching stock data..."):
            result = aggregator.run(raw_input)
    except EmptyInputError:
        st.error("Please enter at least one stock ticker.")
        st.stop()

    df = pd.DataFrame(build_rows(result), columns=COLUMNS)
    failed = [not isinstance(outcome, Success) for outcome in result.outcomes]

    def _highlight(row):
        if failed[row.name]:
            return ["", *["color: #c0392b"] * (len(row) - 1)]
        styles = [""] * len(row)
        value = row["% to Low"]
        if value != "N/A":
            styles[COLUMNS.index("% to Low")] = "color: #c0392b" if value.startswith("-") else "color: #27ae60"
        return styles

    st.dataframe(df.style.apply(_highlight, axis=1), use_container_width=True, hide_index=True)

    message, level = status_message(result)
    if level == "success":
        st.success(message)
    else:
        st.error(message)
    if result.skipped:
        st.warning(f"Rate budget exhausted, not attempted: {', '.join(result.skipped)}")
    st.caption(last_updated())
