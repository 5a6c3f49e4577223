from __future__ import annotations

import numpy as np
import plotly.graph_objects as go

from noisegraph.core import lerp, scurve3, scurve5
from noisemap.noise_map import NoiseMap

from .sinks import ImageBuffer


def heatmap_figure(
    noise_map: NoiseMap,
    *,
    colorscale: str = "Gray",
    show_colorbar: bool = True,
    height: int = 520,
) -> go.Figure:
    fig = go.Figure(
        data=go.Heatmap(
            z=noise_map.data,
            colorscale=colorscale,
            showscale=bool(show_colorbar),
            hovertemplate="x=%{x} y=%{y} value=%{z:.4f}<extra></extra>",
            colorbar=dict(thickness=12),
        )
    )
    fig.update_layout(margin=dict(l=0, r=0, t=0, b=0), height=int(height))
    # Row 0 is the lower bound of the projection; plotly heatmaps draw it at the
    # bottom unless the y axis is reversed.
    fig.update_yaxes(showticklabels=False, showgrid=False, zeroline=False)
    fig.update_xaxes(showticklabels=False, showgrid=False, zeroline=False)
    return fig


def image_figure(image: ImageBuffer, *, height: int = 520) -> go.Figure:
    fig = go.Figure(data=go.Image(z=image.pixels, colormodel="rgba"))
    fig.update_layout(margin=dict(l=0, r=0, t=0, b=0), height=int(height))
    fig.update_yaxes(showticklabels=False, showgrid=False)
    fig.update_xaxes(showticklabels=False, showgrid=False)
    return fig


def surface_figure(
    noise_map: NoiseMap,
    *,
    z_scale: float = 1.0,
    colorscale: str = "Earth",
    max_cells: int = 256,
) -> go.Figure:
    z = noise_map.data
    # Plotly surfaces get sluggish on large grids.
    step = max(1, int(np.ceil(max(z.shape) / max(int(max_cells), 1))))
    z = z[::step, ::step]

    fig = go.Figure(
        data=go.Surface(z=z * float(z_scale), colorscale=colorscale, showscale=False)
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        height=520,
        scene=dict(
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            zaxis=dict(visible=False),
            aspectmode="data",
        ),
    )
    return fig


def histogram_figure(noise_map: NoiseMap, *, bins: int = 80) -> go.Figure:
    fig = go.Figure(
        data=go.Histogram(
            x=noise_map.data.reshape(-1),
            nbinsx=int(bins),
            marker=dict(color="rgba(255,255,255,0.75)"),
        )
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=30, b=0),
        height=260,
        title="Value distribution",
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def interpolation_curves_figure(*, title: str = "Interpolation curves") -> go.Figure:
    """Linear, cubic and quintic S-curves on [0, 1]: the three noise qualities."""
    t = np.linspace(0.0, 1.0, 256, dtype=np.float64)
    curves = {
        "fast (linear)": lerp(0.0, 1.0, t),
        "standard (cubic)": scurve3(t),
        "best (quintic)": scurve5(t),
    }

    fig = go.Figure()
    for name, y in curves.items():
        fig.add_trace(go.Scatter(x=t, y=y, mode="lines", name=name, line=dict(width=2)))

    fig.update_layout(
        title=title,
        margin=dict(l=0, r=0, t=40, b=0),
        height=260,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    fig.update_xaxes(range=[0, 1])
    fig.update_yaxes(range=[0, 1])
    return fig
