"""
Minesweeper Hint Solver - Interactive Board Editor

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt
import streamlit as st
from typing import Dict, Optional, Tuple

from minehint import (
    DEFAULT_COLS,
    DEFAULT_ROWS,
    MINE,
    UNKNOWN,
    Board,
    HintSolver,
    Recommendation,
    describe_recommendation,
    plot_probability_heatmap,
)

TOOLS = ["unknown", "mine"] + [str(n) for n in range(9)]


def tool_value(tool: str):
    """Map a tool name to the cell state it paints."""
    if tool == "unknown":
        return UNKNOWN
    if tool == "mine":
        return MINE
    return int(tool)


def button_label(board: Board, r: int, c: int) -> str:
    v = board.get(r, c)
    if v is UNKNOWN:
        return "·"
    if v == MINE:
        return "💣"
    return str(v) if v > 0 else " "


def render_board_html(
    board: Board, recommendation: Optional[Recommendation] = None
) -> str:
    """Render the board as an HTML table with suggestion highlighting."""
    colors = {
        "1": "#0000ff",
        "2": "#008000",
        "3": "#ff0000",
        "4": "#000080",
        "5": "#800000",
        "6": "#008080",
        "7": "#000000",
        "8": "#808080",
    }

    highlight: Dict[Tuple[int, int], str] = {}
    if recommendation is not None:
        for cell, _ in recommendation.guess_cells:
            highlight[cell] = "#ffe066"  # Best guess
        for cell in recommendation.mine_cells:
            highlight[cell] = "#ff8080"  # Certain mine
        for cell in recommendation.safe_cells:
            highlight[cell] = "#80e080"  # Certain safe

    cell_size = 30
    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for r in range(board.rows):
        html += "<tr>"
        for c in range(board.cols):
            v = board.get(r, c)
            if v is UNKNOWN:
                display = ""
                bg = "#c0c0c0"
                text_color = "#666666"
            elif v == MINE:
                display = "💣"
                bg = "#ffcccc"
                text_color = "#ff0000"
            else:
                display = str(v) if v > 0 else ""
                bg = "#f0f0f0"
                text_color = colors.get(str(v), "#000000")

            bg = highlight.get((r, c), bg)

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: 1px solid #999;
                color: {text_color};
                font-weight: bold;
                font-size: 15px;
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def show_heatmap(board: Board, recommendation: Recommendation) -> None:
    """Draw the probability heatmap and release the figure once Streamlit has it."""
    fig, ax = plt.subplots()
    plot_probability_heatmap(board, recommendation, ax=ax)
    st.pyplot(fig)
    plt.close(fig)


def main():
    st.set_page_config(
        page_title="Minesweeper Hint Solver",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Hint Solver")
    st.markdown("""
    Enter the board you see, then ask for a hint: certain safe cells and mines,
    or the cells with the lowest exact mine probability when nothing is certain.
    """)

    # Sidebar configuration
    st.sidebar.header("Board")
    rows = st.sidebar.number_input("Rows", 1, 30, DEFAULT_ROWS)
    cols = st.sidebar.number_input("Columns", 1, 30, DEFAULT_COLS)

    tool = st.sidebar.radio(
        "Tool",
        TOOLS,
        format_func=lambda t: {"unknown": "Unknown", "mine": "Mine"}.get(t, t),
        horizontal=True,
    )

    st.sidebar.header("Solver")
    max_size = st.sidebar.selectbox(
        "Max component size",
        [20, 30, 40, "Unlimited"],
        index=3,
        help="Frontier components larger than this are skipped.",
    )
    max_size_val = float("inf") if max_size == "Unlimited" else int(max_size)
    time_limit = st.sidebar.slider("Time limit (s)", 1, 30, 10)

    # Initialize session state
    if "board" not in st.session_state:
        st.session_state.board = Board(int(rows), int(cols))
        st.session_state.recommendation = None

    board: Board = st.session_state.board
    if (board.rows, board.cols) != (rows, cols):
        st.session_state.board = board = Board(int(rows), int(cols))
        st.session_state.recommendation = None

    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("Editor")

        btn_col1, btn_col2 = st.columns(2)
        with btn_col1:
            if st.button("Reset Board"):
                board.reset()
                st.session_state.recommendation = None
                st.rerun()
        with btn_col2:
            if st.button("Solve", type="primary"):
                solver = HintSolver(max_component_size=max_size_val, time_limit=time_limit)
                st.session_state.recommendation = solver.solve(board)
                st.rerun()

        for r in range(board.rows):
            row_cols = st.columns(board.cols)
            for c in range(board.cols):
                with row_cols[c]:
                    if st.button(button_label(board, r, c), key=f"cell-{r}-{c}"):
                        board.set_cell(r, c, tool_value(tool))
                        # Edits invalidate the previous advice
                        st.session_state.recommendation = None
                        st.rerun()

    recommendation: Optional[Recommendation] = st.session_state.recommendation

    with col2:
        st.subheader("Hint")
        st.markdown(render_board_html(board, recommendation), unsafe_allow_html=True)

        if recommendation is None:
            st.info("Click 'Solve' to analyse the board.")
        else:
            message = describe_recommendation(recommendation)
            if recommendation.safe_cells:
                st.success(message)
            elif recommendation.has_guess:
                st.warning(message)
            else:
                st.info(message)

            if recommendation.inconsistent_cells:
                st.error("The board is inconsistent around some cells.")
            if recommendation.skipped_cells:
                st.error("Some frontier regions were too large to compute.")

            if recommendation.probabilities:
                show_heatmap(board, recommendation)

            st.markdown("""
            <div style="font-size: 12px; margin-top: 10px;">
            <b>Legend:</b>
            <span style="background: #80e080; padding: 2px 6px; margin: 0 4px;">&nbsp;</span> Safe
            <span style="background: #ff8080; padding: 2px 6px; margin: 0 4px;">&nbsp;</span> Mine
            <span style="background: #ffe066; padding: 2px 6px; margin: 0 4px;">&nbsp;</span> Best guess
            </div>
            """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
