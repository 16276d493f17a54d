"""Chart generation using Plotly."""

from typing import List

import plotly.graph_objects as go

from ..engine.state import StateView

# Industrial Design System - sharp, professional, compact
THEME = {
    "text": "#e8eaed",
    "text_secondary": "#9aa0a6",
    "grid": "rgba(30, 33, 36, 0.8)",
    "cyan": "#00d4ff",
    "amber": "#ffab00",
    "red": "#ff5252",
    "green": "#00e676",
}


def apply_dark_layout(fig: go.Figure, title: str, x_title: str, y_title: str, showlegend: bool = True) -> None:
    """Apply industrial dark theme layout for charts - compact and professional."""
    fig.update_layout(
        title={
            "text": title,
            "x": 0,
            "xanchor": "left",
            "font": {"size": 11, "color": THEME["text_secondary"]}
        },
        xaxis_title=x_title,
        yaxis_title=y_title,
        hovermode="x unified",
        template="plotly_dark",
        height=340,
        margin=dict(l=50, r=20, t=40, b=40),
        showlegend=showlegend,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        plot_bgcolor="rgba(8, 9, 10, 1)",
        paper_bgcolor="rgba(8, 9, 10, 1)",
        font={"color": THEME["text"], "size": 11},
        xaxis=dict(gridcolor=THEME["grid"], zerolinecolor=THEME["grid"]),
        yaxis=dict(gridcolor=THEME["grid"], zerolinecolor=THEME["grid"]),
    )


def create_production_chart(states: List[StateView]) -> go.Figure:
    """Clips made, sold and held over time."""
    ticks = [s.tick for s in states]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.clips_made for s in states],
        name="Clips Made", mode="lines", line=dict(color=THEME["cyan"], width=2)
    ))
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.total_sold for s in states],
        name="Total Sold", mode="lines", line=dict(color=THEME["green"], width=2)
    ))
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.inventory for s in states],
        name="Inventory", mode="lines", line=dict(color=THEME["amber"], width=1.5, dash="dot")
    ))

    apply_dark_layout(fig, "PRODUCTION", "Tick", "Clips")
    return fig


def create_market_chart(states: List[StateView]) -> go.Figure:
    """Funds on the primary axis, demand index and price on the secondary."""
    ticks = [s.tick for s in states]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.funds for s in states],
        name="Funds", mode="lines", line=dict(color=THEME["green"], width=2)
    ))
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.demand_index for s in states],
        name="Demand Index", mode="lines", yaxis="y2", line=dict(color=THEME["cyan"], width=1.5)
    ))
    fig.add_trace(go.Scatter(
        x=ticks, y=[s.price_per_clip for s in states],
        name="Price / Clip", mode="lines", yaxis="y2", line=dict(color=THEME["red"], width=1.5, dash="dash")
    ))

    apply_dark_layout(fig, "MARKET", "Tick", "Funds (cr)")
    fig.update_layout(yaxis2=dict(
        title="Demand / Price",
        overlaying="y",
        side="right",
        gridcolor=THEME["grid"],
    ))
    return fig


def create_trajectory_charts(states: List[StateView]) -> List[go.Figure]:
    """All charts for a report."""
    return [create_production_chart(states), create_market_chart(states)]
