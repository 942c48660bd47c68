import importlib.util
from pathlib import Path

import matplotlib.pyplot as plt

from minehint import solve

DEMO_PATH = Path(__file__).resolve().parent.parent / "app" / "demo.py"


def load_demo():
    spec = importlib.util.spec_from_file_location("minehint_demo", DEMO_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_heatmap_figure_is_closed_after_display(monkeypatch, corner_one_board):
    demo = load_demo()
    shown = []
    monkeypatch.setattr(demo.st, "pyplot", lambda fig: shown.append(fig))
    plt.close("all")

    rec = solve(corner_one_board)
    for _ in range(3):
        demo.show_heatmap(corner_one_board, rec)

    assert len(shown) == 3
    assert plt.get_fignums() == []


def test_render_board_html_highlights_moves(one_two_one_board):
    demo = load_demo()
    html = demo.render_board_html(one_two_one_board, solve(one_two_one_board))
    assert html.count("#80e080") == 1
    assert html.count("#ff8080") == 2
