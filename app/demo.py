"""
Minesweeper Logic Agent - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from minesweeper_ai import DIFFICULTY_LEVELS, Minesweeper, MinesweeperAgent

COLORS = {
    "0": "#cccccc",
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}


def _cell_size(width: int) -> Tuple[int, str]:
    """Scale cell size based on board width."""
    if width >= 30:
        return 14, "10px"
    if width >= 25:
        return 16, "11px"
    if width >= 16:
        return 20, "13px"
    return 26, "15px"


def render_board_html(
    height: int,
    width: int,
    clues: Dict[Tuple[int, int], int],
    flagged: Iterable[Tuple[int, int]],
    proven_safe: Iterable[Tuple[int, int]] = (),
    mines: Iterable[Tuple[int, int]] = (),
    hit_mine: Optional[Tuple[int, int]] = None,
    highlight_cell: Optional[Tuple[int, int]] = None,
) -> str:
    """Render a board as HTML from the agent's knowledge at some step."""
    cell_size, font_size = _cell_size(width)
    flagged_set: Set[Tuple[int, int]] = set(flagged)
    safe_set: Set[Tuple[int, int]] = set(proven_safe)
    mine_set: Set[Tuple[int, int]] = set(mines)

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for row in range(height):
        html += "<tr>"
        for col in range(width):
            cell_pos = (row, col)

            if cell_pos == hit_mine:
                cell = "M"  # Hit mine (caused loss)
                bg = "#ff0000"
                text_color = "#ffffff"
            elif cell_pos in clues:
                cell = str(clues[cell_pos])
                bg = "#f0f0f0" if cell == "0" else "#ffffff"
                text_color = COLORS.get(cell, "#000000")
            elif cell_pos in flagged_set:
                cell = "F"  # Flagged by agent
                bg = "#ffa500"
                text_color = "#ffffff"
            elif cell_pos in mine_set:
                cell = "M"  # Revealed mine (was not flagged)
                bg = "#ffcccc"
                text_color = "#ff0000"
            elif cell_pos in safe_set:
                cell = "S"  # Proven safe, not yet revealed
                bg = "#ccffcc"
                text_color = "#008000"
            else:
                cell = "."
                bg = "#c0c0c0"
                text_color = "#666666"

            # Highlight current cell
            border = "3px solid #ff0000" if cell_pos == highlight_cell else "1px solid #999"
            display = cell if cell != "0" else " "

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def new_game(
    height: int, width: int, mines: int, algorithm: str
) -> Tuple[Minesweeper, MinesweeperAgent]:
    game = Minesweeper(height, width, mines, mines_generation_algorithm=algorithm)
    return game, MinesweeperAgent(height, width)


def main():
    st.set_page_config(
        page_title="Minesweeper Logic Agent",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minesweeper Logic Agent")
    st.markdown("""
    An agent that plays Minesweeper with propositional-logic inference and guesses only when nothing is provably safe.
    """)

    # Sidebar configuration
    st.sidebar.header("Game Configuration")

    presets = {
        f"{name.capitalize()} ({h}x{w}, {m})": (h, w, m)
        for name, (h, w, m) in DIFFICULTY_LEVELS.items()
    }
    preset = st.sidebar.selectbox("Difficulty Preset", list(presets) + ["Custom"])

    if preset in presets:
        height, width, mines = presets[preset]
    else:
        height = st.sidebar.slider("Height", 5, 30, 8)
        width = st.sidebar.slider("Width", 5, 30, 8)
        max_mines = height * width - 9
        mines = st.sidebar.slider("Mines", 1, max_mines, min(8, max_mines))

    algorithm = st.sidebar.selectbox(
        "Mine Generation",
        ["safe_neighborhood_rule", "safe_first_action_rule", "uniform"],
        help="safe_neighborhood_rule: First move + neighbors are safe. "
             "safe_first_action_rule: Only the first move is safe. "
             "uniform: Mines are placed before the first move.",
    )

    # Initialize session state
    if "game" not in st.session_state:
        st.session_state.status = None
        st.session_state.payload = {}
        st.session_state.current_step = 0
        st.session_state.prev_settings = None

    # Auto-generate new game when board settings change
    current_settings = (height, width, mines, algorithm)
    if st.session_state.prev_settings != current_settings:
        st.session_state.game, st.session_state.agent = new_game(
            height, width, mines, algorithm
        )
        st.session_state.status = None
        st.session_state.payload = {}
        st.session_state.current_step = 0
        st.session_state.prev_settings = current_settings

    board_col, stats_col = st.columns([3, 1]) if width < 30 else (st.container(), st.container())

    with board_col:
        st.subheader("Game Board")

        btn_col1, btn_col2 = st.columns(2)

        with btn_col1:
            if st.button("Regenerate Board", type="primary"):
                st.session_state.game, st.session_state.agent = new_game(
                    height, width, mines, algorithm
                )
                st.session_state.status = None
                st.session_state.payload = {}
                st.session_state.current_step = 0
                st.rerun()

        with btn_col2:
            if st.button("Solve"):
                game = st.session_state.game
                if st.session_state.status is not None:
                    # Already played, replay the same board with a fresh agent
                    game.reset()
                agent = MinesweeperAgent(height, width)
                st.session_state.agent = agent

                status, payload = agent.solve(game, record_steps=True)
                st.session_state.status = status
                st.session_state.payload = payload
                st.session_state.current_step = max(len(payload["steps_history"]) - 1, 0)
                st.rerun()

        game = st.session_state.game
        steps_history: List[Dict[str, Any]] = st.session_state.payload.get("steps_history", [])

        if st.session_state.status is not None and steps_history:
            total_steps = len(steps_history)

            nav_col1, nav_col2, nav_col3, nav_col4 = st.columns([1, 1, 1, 2])
            with nav_col1:
                if st.button("⏮ First"):
                    st.session_state.current_step = 0
                    st.rerun()
            with nav_col2:
                if st.button("◀ Prev") and st.session_state.current_step > 0:
                    st.session_state.current_step -= 1
                    st.rerun()
            with nav_col3:
                if st.button("Next ▶") and st.session_state.current_step < total_steps - 1:
                    st.session_state.current_step += 1
                    st.rerun()
            with nav_col4:
                if st.button("Last ⏭"):
                    st.session_state.current_step = total_steps - 1
                    st.rerun()

            if total_steps > 1:
                step_display = st.slider(
                    "Step", 1, total_steps, st.session_state.current_step + 1
                )
                st.session_state.current_step = step_display - 1

            step = steps_history[st.session_state.current_step]
            is_final_step = st.session_state.current_step == total_steps - 1
            method_label = "Safe Move" if step["method"] == "safe" else "Random Move"
            row, col = step["cell"]
            label = f"**Step {st.session_state.current_step + 1}/{total_steps}**: reveal ({row}, {col}) — *{method_label}*"

            if is_final_step and st.session_state.status == 1:
                st.success(label + " — **Game Won!**")
            elif is_final_step and st.session_state.status == -1:
                st.error(label + " — **Game Lost! Hit a mine.**")
            else:
                st.info(label)

            html = render_board_html(
                height,
                width,
                step["clues"],
                step["mines"],
                proven_safe=step["safes"],
                mines=game.mines if is_final_step else (),
                hit_mine=step["cell"] if step["outcome"] == "mine" else None,
                highlight_cell=step["cell"],
            )
        else:
            html = render_board_html(height, width, {}, ())

        st.markdown(html, unsafe_allow_html=True)

        st.markdown("""
        <div style="font-size: 12px; margin-top: 10px;">
        <b>Legend:</b>
        <span style="background: #c0c0c0; color: #666666; padding: 2px 6px; margin: 0 4px; font-weight: bold;">.</span> Unknown
        <span style="background: #ccffcc; color: #008000; padding: 2px 6px; margin: 0 4px; font-weight: bold;">S</span> Proven safe
        <span style="color: #0000ff; font-weight: bold; margin: 0 4px;">1-8</span> Adjacent mines
        <span style="background: #ffa500; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">F</span> Flagged (proven mine)
        <span style="background: #ff0000; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">M</span> Hit mine
        </div>
        """, unsafe_allow_html=True)

    with stats_col:
        st.subheader("Agent Statistics")

        if st.session_state.status is not None:
            payload = st.session_state.payload
            result = {1: "Win", -1: "Loss", 0: "Stuck"}[st.session_state.status]
            metrics: List[Tuple[str, Any]] = [
                ("Result", result),
                ("Moves", payload.get("moves_count", "N/A")),
                ("Safe Moves", payload.get("safe_moves_count", "N/A")),
                ("Random Moves", payload.get("random_moves_count", "N/A")),
                ("Mines Flagged", payload.get("flags_count", "N/A")),
                ("Max Sentences", payload.get("max_sentences_count", "N/A")),
            ]
            for label, value in metrics:
                st.metric(label, value)
        else:
            st.info("Run the agent to see statistics.")

        st.markdown("---")
        st.subheader("Algorithm Info")
        st.markdown("""
        **Inference Rules:**
        1. **Counting**: a sentence with 0 mines is all safe; one with as many mines as cells is all mines
        2. **Subset**: if A ⊂ B, then B − A holds B.count − A.count mines
        3. **Fallback**: uniform random guess among unknown cells
        """)


if __name__ == "__main__":
    main()
