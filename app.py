"""
Memory Management Simulator — Page Replacement & Contiguous Allocation

This application provides an interactive simulation and visualization of two
classic Operating System memory management problems:
    - Page Replacement under a fixed frame budget (FIFO, LRU, Optimal)
    - Contiguous Memory Allocation into free holes (First/Best/Worst Fit)
    - Segment size tagging

The engines live in paging.py and allocation.py; this file only renders them.
Built with Streamlit for the web interface and Plotly for visualizations.

Run with:  streamlit run app.py
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For pacing the playback

import plotly.graph_objects as go            # Interactive plotting library
import streamlit as st                       # Web application framework

import config
from allocation import FitPolicy, allocate, describe as describe_allocation
from errors import ExhaustedError, InvalidConfiguration
from paging import (
    PagingSession,
    ReplacementPolicy,
    compare_policies,
    fault_curve,
    reset_paging,
    run_paging,
    step_paging,
)
from parsing import parse_positive_int, parse_reference_string, parse_sizes
from utils import frame_label, get_color, hole_color, timeline_label


# =============================================================================
# CHART HELPERS
# =============================================================================

def frames_figure(frames, touched=None, kind=None):
    """
    Build a bar chart of the physical frames.

    Args:
        frames (Tuple): Page in each frame, None for a free frame
        touched (Optional[int]): Frame used by the latest access
        kind (Optional[OutcomeKind]): Outcome of the latest access
    """
    fig = go.Figure()
    x, y, text, colors = [], [], [], []
    for i, page in enumerate(frames):
        x.append(i)
        y.append(1)
        text.append(frame_label(i, page))
        if i == touched:
            colors.append(get_color(kind))
        else:
            colors.append("lightblue" if page is not None else config.FREE_COLOR)

    fig.add_trace(go.Bar(x=x, y=y, text=text, marker_color=colors,
                         hovertext=text, hoverinfo='text'))
    fig.update_layout(height=150, showlegend=False,
                      yaxis=dict(showticklabels=False))
    return fig


def timeline_figure(outcomes):
    """Scatter of every access: green dots for hits, red for faults."""
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=[o.time + 1 for o in outcomes],
        y=[str(o.page) for o in outcomes],
        mode="markers",
        marker=dict(size=14, color=[get_color(o.kind) for o in outcomes]),
        text=[timeline_label(o) for o in outcomes],
        hoverinfo="text",
    ))
    fig.update_layout(height=250, xaxis_title="Access #", yaxis_title="Page",
                      yaxis=dict(type="category"))
    return fig


def show_stats(counts):
    c1, c2, c3 = st.columns(3)
    c1.metric("Accesses", counts.total)
    c2.metric("Page Faults", counts.faults)
    c3.metric("Hits", counts.hits)
    st.caption(f"Hit ratio: {counts.hit_ratio} • Fault rate: {counts.fault_rate}")


def show_event_log(event_log):
    st.subheader("Event Log")
    for ev in event_log[-config.EVENT_LOG_LIMIT:][::-1]:
        st.write(ev)


# =============================================================================
# STREAMLIT UI - Web Application Interface
# =============================================================================

st.set_page_config(page_title="Memory Management Simulator", layout="wide")

page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Memory Management Simulator — Page Replacement & Allocation")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ### **1. Page Fault**
        - Occurs when a referenced page is not in any frame.
        - The page is loaded into a free frame, or a resident page is evicted.

        ### **2. Page Replacement Algorithms**
        #### **FIFO (First In First Out)**
        - Replace the page that entered memory earliest.
        - Suffers from **Belady's anomaly**: more frames can mean more faults
          (try `1 2 3 4 1 2 5 1 2 3 4 5` with 3 and then 4 frames).

        #### **LRU (Least Recently Used)**
        - Replace the page that hasn't been used for the longest time.

        #### **Optimal**
        - Replace the page whose next use is farthest in the future.
        - Not implementable in a real OS, but a lower bound for every other policy.

        ### **3. Contiguous Allocation**
        - **First Fit**: first hole large enough.
        - **Best Fit**: smallest hole large enough (least leftover).
        - **Worst Fit**: largest hole (biggest leftover).
        - If no hole is large enough the process cannot be placed.

        ### **4. Segmentation**
        - Divides a program into logical segments (code, data, stack) of varying size.
        """
    )
    st.stop()

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Paging Settings")

frame_count = st.sidebar.number_input(
    "Frames",
    min_value=config.MIN_FRAMES,
    max_value=config.MAX_FRAMES,
    value=config.DEFAULT_FRAMES,
    step=1,
)

policy = st.sidebar.selectbox(
    "Replacement Policy",
    options=list(ReplacementPolicy),
    format_func=lambda p: p.value,
)

access_input = st.sidebar.text_area(
    "Reference string (space separated)",
    value=config.DEFAULT_REFERENCE,
)

run_speed = st.sidebar.slider(
    "Playback speed (ops/sec)",
    min_value=config.MIN_SPEED,
    max_value=config.MAX_SPEED,
    value=config.DEFAULT_SPEED,
)

# -----------------------------------------------------------------------------
# SESSION STATE - one stepping session per browser session
# -----------------------------------------------------------------------------

if 'paging_session' not in st.session_state:
    st.session_state.paging_session = None
if 'paging_run' not in st.session_state:
    st.session_state.paging_run = None

# A changed configuration invalidates the stepping session
session = st.session_state.paging_session
if session is not None and (session.frame_count != int(frame_count) or session.policy is not policy):
    st.session_state.paging_session = None

if st.sidebar.button("Reset Simulation"):
    reset_paging(st.session_state.paging_session)
    st.session_state.paging_session = None
    st.session_state.paging_run = None
    st.sidebar.success("Paging reset.")

paging_tab, seg_tab, alloc_tab = st.tabs(["Paging", "Segmentation", "Allocation"])

# =============================================================================
# PAGING TAB
# =============================================================================

with paging_tab:
    col1, col2 = st.columns([1, 2])

    with col1:
        st.subheader("Controls")

        if st.button("Run Sequence"):
            try:
                seq = parse_reference_string(access_input)
                run = run_paging(seq, int(frame_count), policy)
            except InvalidConfiguration as e:
                st.warning(str(e))
            else:
                st.session_state.paging_run = run
                st.session_state.paging_session = None
                st.success(f"Run complete. Accesses: {run.counts.total} • "
                           f"Faults: {run.counts.faults} • Hits: {run.counts.hits}")

        if st.button("Step Once"):
            try:
                if st.session_state.paging_session is None:
                    seq = parse_reference_string(access_input)
                    st.session_state.paging_session = PagingSession(seq, int(frame_count), policy)
                    st.session_state.paging_run = None
                outcome, counts = step_paging(st.session_state.paging_session)
            except InvalidConfiguration as e:
                st.warning(str(e))
            except ExhaustedError as e:
                st.info(str(e))
            else:
                st.success(timeline_label(outcome))

        if st.button("Play Remaining Steps"):
            stepper = st.session_state.paging_session
            if stepper is None:
                st.warning("Press Step Once to start a step session first.")
            else:
                placeholder = st.empty()
                while not stepper.finished:
                    outcome, _ = step_paging(stepper)
                    placeholder.plotly_chart(
                        frames_figure(outcome.frames, outcome.frame_index, outcome.kind),
                        use_container_width=True,
                    )
                    time.sleep(1.0 / run_speed)
                st.success("Step run finished.")

        stepper = st.session_state.paging_session
        run = st.session_state.paging_run
        if stepper is not None:
            show_event_log(stepper.event_log)
        elif run is not None:
            show_event_log(run.event_log)

    with col2:
        stepper = st.session_state.paging_session
        run = st.session_state.paging_run

        if stepper is not None:
            outcomes, counts, frames = stepper.outcomes, stepper.counts, stepper.frames
            fifo_order = stepper.load_order
            st.caption(f"Step {stepper.cursor} of {len(stepper.reference)}")
        elif run is not None:
            outcomes, counts, frames = run.outcomes, run.counts, run.final_frames
            fifo_order = None
        else:
            outcomes, counts, frames, fifo_order = [], None, (None,) * int(frame_count), None

        st.subheader("Physical Frames")
        last = outcomes[-1] if outcomes else None
        st.plotly_chart(
            frames_figure(frames,
                          last.frame_index if last else None,
                          last.kind if last else None),
            use_container_width=True,
        )

        if counts is not None:
            st.subheader("Statistics")
            show_stats(counts)

        if outcomes:
            st.subheader("Timeline")
            st.plotly_chart(timeline_figure(outcomes), use_container_width=True)

        if fifo_order is not None and policy is ReplacementPolicy.FIFO:
            st.subheader("Replacement Queue (FIFO order)")
            st.write(fifo_order)

        # ----- Policy comparison -----
        st.subheader("Policy Comparison")
        try:
            seq = parse_reference_string(access_input)
        except InvalidConfiguration as e:
            st.write(str(e))
        else:
            results = compare_policies(seq, int(frame_count))
            st.table([{"policy": p.value, **c.as_dict()} for p, c in results.items()])

            fig = go.Figure()
            for p in ReplacementPolicy:
                curve = fault_curve(seq, p, config.CURVE_FRAME_RANGE)
                fig.add_trace(go.Scatter(x=list(curve.keys()), y=list(curve.values()),
                                         mode="lines+markers", name=p.value))
            fig.update_layout(height=300, title="Page Faults vs Number of Frames",
                              xaxis_title="Frames", yaxis_title="Faults")
            st.plotly_chart(fig, use_container_width=True)

# =============================================================================
# SEGMENTATION TAB
# =============================================================================

with seg_tab:
    seg_input = st.text_input("Segment sizes (KB, space separated)", value=config.DEFAULT_SEGMENTS)
    if st.button("Visualize Segments"):
        try:
            segs = parse_sizes(seg_input, "segment sizes")
        except InvalidConfiguration as e:
            st.warning(str(e))
        else:
            for i, s in enumerate(segs):
                st.write(f"Segment {i} → {s} KB")
            st.success(f"Visualized {len(segs)} segments.")

# =============================================================================
# ALLOCATION TAB
# =============================================================================

with alloc_tab:
    holes_input = st.text_input("Hole sizes (KB, space separated)", value=config.DEFAULT_HOLES)
    proc_input = st.text_input("Process size (KB)", value=str(config.DEFAULT_PROCESS_SIZE))
    method = st.selectbox("Method", options=list(FitPolicy), format_func=lambda p: p.value)

    if st.button("Allocate"):
        try:
            holes = parse_sizes(holes_input, "hole sizes")
            proc = parse_positive_int(proc_input, "process size")
            result = allocate(holes, proc, method)
        except InvalidConfiguration as e:
            st.warning(str(e))
        else:
            if result.no_fit:
                st.error(describe_allocation(result))
            else:
                st.success(describe_allocation(result) + f" (method: {result.policy.value})")

            fig = go.Figure()
            fig.add_trace(go.Bar(
                x=[f"Hole {h.index}" for h in result.holes],
                y=[h.size for h in result.holes],
                marker_color=[hole_color(h.index == result.selected) for h in result.holes],
                text=[f"{h.size} KB" for h in result.holes],
            ))
            fig.add_hline(y=result.request_size, line_dash="dash",
                          annotation_text=f"Process {result.request_size} KB")
            fig.update_layout(height=300, showlegend=False, title="Holes snapshot")
            st.plotly_chart(fig, use_container_width=True)
