"""Rock-Paper-Scissors CFR Solver — Streamlit Dashboard.

Four-tab interactive dashboard for exploring CFR self-play results:
  Tab 1 — Convergence         (matplotlib, running average + exploitability)
  Tab 2 — Interactive Plots   (Plotly, hover for iteration + probability)
  Tab 3 — Simulation          (Monte Carlo EV of the trained strategy)
  Tab 4 — Strategy Report     (average strategy, convergence, regrets)

Run (from the repository root):
    PYTHONPATH=. streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import matplotlib.pyplot as plt
import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="RPS CFR Solver",
    page_icon="✂️",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import analysis modules once (cached for the process lifetime)."""
    from src.analysis.convergence_plots import plot_convergence, plot_strategy_bars
    from src.analysis.plotly_convergence import (
        build_convergence_figure,
        build_strategy_figure,
    )
    from src.analysis.simulator import simulate_hands
    from src.analysis.strategy_report import (
        format_strategy,
        print_average_strategy,
        print_convergence,
        print_regret_summary,
        print_simulation,
    )
    from src.solvers.cfr import uniform_strategy

    return {
        "plot_convergence": plot_convergence,
        "plot_strategy_bars": plot_strategy_bars,
        "build_convergence_figure": build_convergence_figure,
        "build_strategy_figure": build_strategy_figure,
        "simulate_hands": simulate_hands,
        "format_strategy": format_strategy,
        "print_average_strategy": print_average_strategy,
        "print_convergence": print_convergence,
        "print_regret_summary": print_regret_summary,
        "print_simulation": print_simulation,
        "uniform_strategy": uniform_strategy,
    }


@st.cache_resource
def _run_cfr(n_iterations: int, seed: int):
    """Run the CFR solver and cache the result (keyed on iterations and seed)."""
    from src.solvers.cfr import solve

    return solve(
        n_iterations=n_iterations,
        seed=seed,
        convergence_check_every=max(n_iterations // 50, 1),
    )


# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("✂️ RPS CFR Solver")
    st.markdown("---")

    n_cfr_iterations = st.slider(
        "CFR iterations",
        min_value=1_000,
        max_value=50_000,
        value=10_000,
        step=1_000,
    )
    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    run_cfr = st.button("Run CFR Solver", type="primary")

    st.markdown("---")
    n_sim_hands = st.slider(
        "Simulation hands",
        min_value=1_000,
        max_value=100_000,
        value=20_000,
        step=1_000,
    )

    st.markdown("---")
    st.caption("Regret matching → self-play → average strategy")

# ─── CFR solver result ────────────────────────────────────────────────────────

cfr_result = None
if run_cfr or "cfr_result_cached" in st.session_state:
    with st.spinner(f"Running CFR ({n_cfr_iterations:,} iterations) …"):
        cfr_result = _run_cfr(n_cfr_iterations, int(seed))
    st.session_state["cfr_result_cached"] = True
    st.sidebar.success(
        f"CFR done — Exploitability: {cfr_result.exploitability:.4f} | "
        f"Game value: {cfr_result.game_value:+.4f}"
    )

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Convergence",
        "Interactive Plots",
        "Simulation",
        "Strategy Report",
    ]
)

m = _load_analysis_modules()

# ── Tab 1: Convergence ────────────────────────────────────────────────────────

with tab1:
    st.header("Convergence")
    if cfr_result is not None:
        st.caption(f"P1 average strategy: {m['format_strategy'](cfr_result.p1_strategy)}")
        fig = m["plot_convergence"](cfr_result, show=False)
        st.pyplot(fig)
        plt.close(fig)
        st.markdown("---")
        fig = m["plot_strategy_bars"](cfr_result, show=False)
        st.pyplot(fig)
        plt.close(fig)
    else:
        st.info("Press **Run CFR Solver** in the sidebar to train a strategy.")

# ── Tab 2: Interactive Plots ──────────────────────────────────────────────────

with tab2:
    st.header("Interactive Plots")
    if cfr_result is not None:
        st.plotly_chart(m["build_convergence_figure"](cfr_result), use_container_width=True)
        st.markdown("---")
        st.plotly_chart(m["build_strategy_figure"](cfr_result), use_container_width=True)
    else:
        st.info("Press **Run CFR Solver** in the sidebar to see interactive figures.")

# ── Tab 3: Simulation ─────────────────────────────────────────────────────────

with tab3:
    st.header("Monte Carlo Simulation")
    st.caption("Plays the trained P1 strategy against the uniform Nash mix.")

    p1_strategy = cfr_result.p1_strategy if cfr_result is not None else m["uniform_strategy"]()
    with st.spinner(f"Simulating {n_sim_hands:,} hands …"):
        sim = m["simulate_hands"](
            p1_strategy,
            m["uniform_strategy"](),
            n_hands=n_sim_hands,
            seed=int(seed),
        )

    col1, col2, col3 = st.columns(3)
    col1.metric("P1 EV / hand", f"{sim.p1_ev:+.4f}")
    col2.metric("P2 EV / hand", f"{sim.p2_ev:+.4f}")
    col3.metric("Std dev", f"{sim.std_ev:.4f}")

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        m["print_simulation"](sim)
    st.code(buf.getvalue(), language=None)

# ── Tab 4: Strategy Report ────────────────────────────────────────────────────

with tab4:
    st.header("Strategy Report")

    if cfr_result is not None:
        for section_fn, label in [
            (m["print_average_strategy"], "Average Strategy"),
            (m["print_convergence"], "Convergence"),
            (m["print_regret_summary"], "Cumulative Regret"),
        ]:
            st.subheader(label)
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                section_fn(cfr_result)
            st.code(buf.getvalue(), language=None)
    else:
        st.info("Press **Run CFR Solver** in the sidebar to see the strategy report.")
