from __future__ import annotations

import time

import numpy as np
import streamlit as st

from noisegraph import NoiseQuality
from noisemap.pipeline import (
    FILTERS,
    PRIMITIVES,
    PROJECTIONS,
    SIZES,
    MapRequest,
    generate,
)
from ui.styles import header, inject_global_styles, log_block
from viz.export import noise_map_to_npy_bytes, noise_map_to_png_bytes, sink_to_png_bytes
from viz.figures import (
    heatmap_figure,
    histogram_figure,
    interpolation_curves_figure,
    surface_figure,
)
from viz.gradient import GRADIENTS

st.set_page_config(page_title="Coherent Noise Maps", page_icon="~", layout="wide")

inject_global_styles()


def _label(name: str) -> str:
    return name.replace("_", " ").title()


def _sidebar() -> MapRequest | None:
    defaults = MapRequest()
    with st.sidebar.form("noise"):
        st.subheader("Generator")
        primitive = st.selectbox(
            "Primitive",
            PRIMITIVES,
            index=PRIMITIVES.index(defaults.primitive),
            format_func=_label,
        )
        quality = st.selectbox(
            "Quality",
            [q.value for q in NoiseQuality],
            index=[q.value for q in NoiseQuality].index(defaults.quality),
            format_func=_label,
        )
        seed = st.number_input(
            "Seed", min_value=-(2**31), max_value=2**31 - 1, value=defaults.seed, step=1
        )

        st.subheader("Filter")
        filter_name = st.selectbox(
            "Filter", FILTERS, index=FILTERS.index(defaults.filter), format_func=_label
        )
        frequency = st.number_input("Frequency", value=defaults.frequency, format="%.4f")
        lacunarity = st.number_input("Lacunarity", value=defaults.lacunarity, format="%.4f")
        gain = st.number_input("Gain", value=defaults.gain, format="%.4f")
        offset = st.number_input("Offset", value=defaults.offset, format="%.4f")
        exponent = st.number_input(
            "Spectral exponent", value=defaults.spectral_exponent, format="%.4f"
        )
        octaves = st.slider("Octaves", min_value=1, max_value=30, value=defaults.octave_count)

        st.subheader("Output")
        projection = st.selectbox(
            "Projection",
            PROJECTIONS,
            index=PROJECTIONS.index(defaults.projection),
            format_func=_label,
        )
        size = st.selectbox(
            "Size",
            SIZES,
            index=SIZES.index((defaults.width, defaults.height)),
            format_func=lambda wh: f"{wh[0]} x {wh[1]}",
        )
        seamless = st.checkbox("Seamless", value=defaults.seamless)
        gradient = st.selectbox("Gradient", list(GRADIENTS), format_func=_label)
        light = st.checkbox("Lighting", value=defaults.light_enabled)

        submitted = st.form_submit_button("Generate", use_container_width=True)

    if not submitted and "result" in st.session_state:
        return None

    return MapRequest(
        primitive=primitive,
        filter=filter_name,
        quality=quality,
        seed=int(seed),
        frequency=float(frequency),
        lacunarity=float(lacunarity),
        gain=float(gain),
        offset=float(offset),
        spectral_exponent=float(exponent),
        octave_count=int(octaves),
        projection=projection,
        width=int(size[0]),
        height=int(size[1]),
        seamless=bool(seamless),
        gradient=gradient,
        light_enabled=bool(light),
    )


def _run(request: MapRequest) -> None:
    bar = st.progress(0.0, text="Building noise map ...")
    stages = {"build": "Building noise map", "render": "Rendering image"}

    def on_progress(stage: str, row: int, height: int) -> None:
        done = (row + 1) / height
        # Redrawing every row is slow on big maps.
        if row + 1 == height or row % 8 == 0:
            bar.progress(done, text=f"{stages[stage]} ... {done * 100:.0f}% - {row + 1} line(s)")

    t0 = time.perf_counter()
    noise_map, image = generate(request, on_progress)
    elapsed = time.perf_counter() - t0
    bar.empty()

    effective = request.effective()
    lo, hi = noise_map.min_max()
    st.session_state["result"] = {
        "request": effective,
        "noise_map": noise_map,
        "image": image,
        "log": [
            f"Create a {effective.width} x {effective.height} image "
            f"with a {effective.projection} projection",
            f"{effective.primitive} -> {effective.filter}, seed {effective.seed}, "
            f"quality {effective.quality}, seamless {effective.seamless}",
            f"range [{lo:.4f}, {hi:.4f}], mean {float(np.mean(noise_map.data)):.4f}",
            f"done in {elapsed * 1000.0:.0f} ms",
        ],
    }


header(
    "Coherent Noise Maps",
    "Compose a primitive with a fractal filter, project it and render it.",
)

request = _sidebar()
if request is not None:
    _run(request)

result = st.session_state.get("result")
if result is None:
    st.info("Pick parameters in the sidebar and press Generate.")
    st.stop()

noise_map = result["noise_map"]
image = result["image"]

left, right = st.columns([3, 2])
with left:
    st.image(image.pixels, use_container_width=True)
with right:
    log_block(result["log"])
    st.download_button(
        "Download image (PNG)",
        data=sink_to_png_bytes(image),
        file_name="noise.png",
        mime="image/png",
        use_container_width=True,
    )
    st.download_button(
        "Download heightmap (PNG)",
        data=noise_map_to_png_bytes(noise_map),
        file_name="heightmap.png",
        mime="image/png",
        use_container_width=True,
    )
    st.download_button(
        "Download values (.npy)",
        data=noise_map_to_npy_bytes(noise_map),
        file_name="noise.npy",
        mime="application/octet-stream",
        use_container_width=True,
    )

tab_heat, tab_surface, tab_hist, tab_curves = st.tabs(
    ["Heatmap", "Surface", "Histogram", "Interpolation"]
)
with tab_heat:
    st.plotly_chart(heatmap_figure(noise_map), use_container_width=True)
with tab_surface:
    z_scale = st.slider("Height scale", min_value=1.0, max_value=200.0, value=40.0)
    st.plotly_chart(surface_figure(noise_map, z_scale=z_scale), use_container_width=True)
with tab_hist:
    st.plotly_chart(histogram_figure(noise_map), use_container_width=True)
with tab_curves:
    st.plotly_chart(interpolation_curves_figure(), use_container_width=True)
