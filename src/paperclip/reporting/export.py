"""Export functionality for CSV, JSON, and HTML."""

import json
from typing import Any, List, Optional

import pandas as pd

from ..simulation.runner import SimulationResult


def trajectory_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per snapshot, indexed by tick, with per-tick flows joined in."""
    df = pd.DataFrame([state.to_record() for state in result.states])
    flows = pd.DataFrame([
        {
            'tick': report.tick,
            'produced': report.produced,
            'sold': report.sold,
            'revenue': report.revenue,
        }
        for report in result.reports
    ], columns=['tick', 'produced', 'sold', 'revenue'])
    df = df.merge(flows, on='tick', how='left')
    df[['produced', 'sold', 'revenue']] = df[['produced', 'sold', 'revenue']].fillna(0)
    return df.set_index('tick')


def export_csv(result: SimulationResult, filepath: str):
    """Export simulation trajectory to CSV."""
    trajectory_frame(result).to_csv(filepath)


def export_json(result: SimulationResult, filepath: str):
    """Export simulation results to JSON."""
    export_data = {
        'config': result.config.to_dict(),
        'config_hash': result.config.compute_hash(),
        'states': [state.to_record() for state in result.states],
        'notifications': [
            {
                'channel': n.channel,
                'message': n.message,
                'severity': n.severity.value if n.severity else None,
            }
            for n in result.notifications
        ],
        'final_metrics': result.final_metrics,
        'invariant_violations': result.invariant_violations,
    }

    with open(filepath, 'w') as f:
        json.dump(export_data, f, indent=2)


def export_html_report(result: SimulationResult, filepath: str, charts: Optional[List[Any]] = None):
    """Export HTML report with charts."""
    metrics = result.final_metrics
    chart_html = "\n".join(
        f'<div class="chart">{chart.to_html(full_html=False, include_plotlyjs="cdn")}</div>'
        for chart in (charts or [])
    )
    html = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>Paperclip Simulation Report</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 20px; }}
            h1 {{ color: #333; }}
            .metric {{ margin: 10px 0; padding: 10px; background: #f5f5f5; }}
            .chart {{ margin: 20px 0; }}
        </style>
    </head>
    <body>
        <h1>Paperclip Simulation Report</h1>

        <div class="metric">
            <h2>Configuration Hash</h2>
            <p>{result.config.compute_hash()}</p>
        </div>

        <div class="metric">
            <h2>Final Metrics</h2>
            <ul>
                <li>Ticks: {metrics.get('ticks', 0):,}</li>
                <li>Clips Made: {metrics.get('clips_made', 0):,}</li>
                <li>Total Sold: {metrics.get('total_sold', 0):,}</li>
                <li>Funds: {metrics.get('funds', 0):,.2f} cr</li>
                <li>Autoclippers / Factories: {metrics.get('autoclippers', 0)} / {metrics.get('factories', 0)}</li>
                <li>Invariant Violations: {len(result.invariant_violations)}</li>
            </ul>
        </div>

        {chart_html}

        <div class="metric">
            <h2>Configuration</h2>
            <pre>{json.dumps(result.config.to_dict(), indent=2)}</pre>
        </div>
    </body>
    </html>
    """

    with open(filepath, 'w') as f:
        f.write(html)
