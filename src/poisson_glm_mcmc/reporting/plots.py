from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import numpy as np
import plotly.graph_objects as go
import polars as pl
from plotly.subplots import make_subplots

from ..postprocess.chains import MergedDraws

__all__ = [
    "plot_predictive_intervals",
    "plot_traces",
    "plot_autocorrelation",
    "plot_posterior_pairs",
    "plot_rhat",
    "save_figure",
]


def plot_predictive_intervals(
    summary: pl.DataFrame,
    *,
    prob: float = 0.95,
    title: str = "Posterior predictive intervals",
    custom_layout: Optional[Dict[str, Any]] = None,
) -> go.Figure:
    """Observed counts against centered x with true, fitted and interval curves.

    ``summary`` is the frame produced by ``summarize_predictive``.
    """
    x = summary["x_centered"].to_list()
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=x,
            y=summary["upper"].to_list(),
            mode="lines",
            name=f"{prob:.0%} predictive upper",
            line=dict(color="rgba(31, 119, 180, 0.6)", dash="dot"),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=summary["lower"].to_list(),
            mode="lines",
            name=f"{prob:.0%} predictive lower",
            line=dict(color="rgba(31, 119, 180, 0.6)", dash="dot"),
            fill="tonexty",
            fillcolor="rgba(31, 119, 180, 0.12)",
        )
    )
    mu_true = summary["mu_true"].to_numpy()
    if np.isfinite(mu_true).any():
        fig.add_trace(
            go.Scatter(
                x=x,
                y=mu_true.tolist(),
                mode="lines",
                name="True rate",
                line=dict(color="black", dash="dash"),
            )
        )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=summary["fitted"].to_list(),
            mode="lines",
            name="Posterior mean fit",
            line=dict(color="firebrick"),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=summary["y"].to_list(),
            mode="markers",
            name="Observed",
            marker=dict(size=6, opacity=0.7, color="gray"),
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="x (centered)",
        yaxis_title="Count",
        template="plotly_white",
        **(custom_layout or {}),
    )
    return fig


def plot_traces(
    idata,
    var_names: Sequence[str] = ("a", "b"),
    *,
    title: str = "Trace plots",
) -> go.Figure:
    """One row per parameter, one line per chain, against the draw label."""
    posterior = idata.posterior
    fig = make_subplots(
        rows=len(var_names), cols=1, shared_xaxes=True, subplot_titles=list(var_names)
    )
    draws = posterior["draw"].values
    for row, name in enumerate(var_names, start=1):
        values = np.asarray(posterior[name].transpose("chain", "draw").values)
        for chain_idx in range(values.shape[0]):
            fig.add_trace(
                go.Scatter(
                    x=draws,
                    y=values[chain_idx],
                    mode="lines",
                    name=f"chain {chain_idx}",
                    legendgroup=f"chain {chain_idx}",
                    showlegend=row == 1,
                    line=dict(width=1),
                ),
                row=row,
                col=1,
            )
        fig.update_yaxes(title_text=name, row=row, col=1)
    fig.update_xaxes(title_text="Iteration", row=len(var_names), col=1)
    fig.update_layout(title=title, template="plotly_white")
    return fig


def _autocorrelation(series: np.ndarray, max_lag: int) -> np.ndarray:
    cleaned = np.asarray(series, dtype=float)
    cleaned = cleaned[np.isfinite(cleaned)]
    out = np.zeros(max_lag + 1)
    out[0] = 1.0
    if cleaned.size < 2:
        return out
    cleaned = cleaned - cleaned.mean()
    denom = float(np.dot(cleaned, cleaned))
    if denom <= 0:
        return out
    for lag in range(1, min(max_lag, cleaned.size - 1) + 1):
        out[lag] = float(np.dot(cleaned[:-lag], cleaned[lag:])) / denom
    return out


def plot_autocorrelation(
    idata,
    var_names: Sequence[str] = ("a", "b"),
    *,
    max_lag: int = 30,
    title: str = "Autocorrelation",
) -> go.Figure:
    """Per-chain autocorrelation by lag; values near zero past lag 1 mean good mixing."""
    posterior = idata.posterior
    fig = make_subplots(rows=len(var_names), cols=1, subplot_titles=list(var_names))
    lags = list(range(max_lag + 1))
    for row, name in enumerate(var_names, start=1):
        values = np.asarray(posterior[name].transpose("chain", "draw").values)
        for chain_idx in range(values.shape[0]):
            fig.add_trace(
                go.Bar(
                    x=lags,
                    y=_autocorrelation(values[chain_idx], max_lag),
                    name=f"chain {chain_idx}",
                    legendgroup=f"chain {chain_idx}",
                    showlegend=row == 1,
                ),
                row=row,
                col=1,
            )
    fig.update_layout(title=title, template="plotly_white", barmode="group")
    fig.update_xaxes(title_text="Lag", row=len(var_names), col=1)
    return fig


def plot_posterior_pairs(
    draws: MergedDraws,
    *,
    truth: Optional[Mapping[str, float]] = None,
    title: str = "Joint posterior of a and b",
) -> go.Figure:
    fig = go.Figure(
        data=[
            go.Scatter(
                x=draws.a,
                y=draws.b,
                mode="markers",
                name="Posterior draws",
                marker=dict(size=4, opacity=0.35),
            )
        ]
    )
    if truth:
        fig.add_trace(
            go.Scatter(
                x=[truth["a"]],
                y=[truth["b"]],
                mode="markers",
                name="True value",
                marker=dict(size=12, symbol="x", color="black"),
            )
        )
    fig.update_layout(
        title=title, xaxis_title="a", yaxis_title="b", template="plotly_white"
    )
    return fig


def plot_rhat(
    rhat: Mapping[str, float],
    *,
    threshold: float = 1.01,
    title: str = "Potential scale reduction (R-hat)",
) -> go.Figure:
    names = list(rhat)
    values = [float(rhat[n]) for n in names]
    fig = go.Figure(data=[go.Bar(x=names, y=values, name="R-hat")])
    fig.add_hline(y=threshold, line=dict(color="firebrick", dash="dash"))
    fig.update_layout(
        title=title,
        xaxis_title="Parameter",
        yaxis_title="R-hat",
        template="plotly_white",
    )
    return fig


def save_figure(fig: go.Figure, path: str | Path) -> Path:
    """Write ``fig`` as interactive HTML for ``.html`` paths, a static image otherwise."""
    dst = Path(path)
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.suffix.lower() in {".html", ".htm"}:
        fig.write_html(dst)
    else:
        fig.write_image(dst)
    return dst
