from deal_hunter.ui.bridge import DealHunterBridge
from deal_hunter.ui.render import render_deals, render_grid, render_table, results_summary

__all__ = [
    "DealHunterBridge",
    "render_deals",
    "render_grid",
    "render_table",
    "results_summary",
]
