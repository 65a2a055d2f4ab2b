"""
Linez - live viewer

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image

from linez.canvas import Canvas
from linez.config import LinezConfig
from linez.driver import make_driver
from linez.image_io import canvas_to_image, compute_target_size, decode_frame

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Linez",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = LinezConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }
    h1, h2, h3 {
        font-weight: 300;
        letter-spacing: 0.06em;
        text-transform: uppercase;
    }
    .label-detail {
        text-align: center;
        font-size: 0.8rem;
        color: #888;
        letter-spacing: 0.04em;
    }
</style>
""", unsafe_allow_html=True)

# -- Title -------------------------------------------------------------
st.title("Linez")
st.caption("Random lines, kept only when they bring the canvas closer to the target.")

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2, ctrl3, ctrl4 = st.columns(4)
with ctrl1:
    max_side = st.slider("Max side (px)", 16, 512, 128)
with ctrl2:
    iterations = st.slider("Iterations / frame", 64, 8192, _DEFAULTS.iterations, step=64)
with ctrl3:
    searches = st.slider("Searches", 1, 8, _DEFAULTS.searches)
with ctrl4:
    frames = st.slider("Frames", 1, 1000, 100)

seed_text = st.text_input("Seed (blank = random)", "")
seed = int(seed_text) if seed_text.strip().isdigit() else None

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Target image", type=["png", "jpg", "jpeg", "bmp", "webp"],
)

if uploaded is None:
    st.info("Upload an image to begin.")
    st.stop()

original = Image.open(io.BytesIO(uploaded.getvalue())).convert("RGB")
w, h = compute_target_size(original.width, original.height, max_side)
target_img = original.resize((w, h), Image.LANCZOS)
target = Canvas.from_array(np.array(target_img, dtype=np.uint8))

left, right = st.columns(2)
with left:
    st.image(target_img, use_container_width=True)
    st.markdown(f'<div class="label-detail">Target {w} &times; {h}</div>',
                unsafe_allow_html=True)
with right:
    live = st.empty()
    live.image(Image.new("RGB", (w, h)), use_container_width=True)
    status = st.empty()

if st.button("DRAW", type="primary", use_container_width=True):
    cfg = LinezConfig(iterations=iterations, searches=searches, frames=frames, seed=seed)
    progress = st.progress(0.0)
    t0 = time.perf_counter()

    with make_driver(target, cfg) as driver:
        for i in range(cfg.frames):
            if driver.step():
                live.image(decode_frame(driver.buffer, w, h), use_container_width=True)
            progress.progress((i + 1) / cfg.frames)
            status.markdown(
                f'<div class="label-detail">frame {driver.frame} &middot; '
                f"{driver.accepted:,} lines</div>",
                unsafe_allow_html=True,
            )
        result = driver.result().copy()
        loss = driver.loss()

    elapsed = time.perf_counter() - t0

    m1, m2, m3 = st.columns(3)
    m1.metric("Lines drawn", f"{driver.accepted:,}")
    m2.metric("Mean loss / px", f"{loss / (w * h):.0f}")
    m3.metric("Time", f"{elapsed:.1f} s")

    buf = io.BytesIO()
    canvas_to_image(result).save(buf, format="PNG")
    st.download_button(
        "Download PNG",
        data=buf.getvalue(),
        file_name="linez.png",
        mime="image/png",
        use_container_width=True,
    )
