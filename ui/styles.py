from __future__ import annotations

import html

import streamlit as st

APP_CSS = r"""
@import url('https://fonts.googleapis.com/css2?family=IBM+Plex+Sans:wght@400;500;600&family=IBM+Plex+Mono:wght@400;500&display=swap');

html, body, [class*="st-"] {
  font-family: "IBM Plex Sans", ui-sans-serif, system-ui, sans-serif;
}

code, .cn-mono {
  font-family: "IBM Plex Mono", ui-monospace, monospace;
}

/* Rendered noise images stay pixel-exact when scaled */
[data-testid="stImage"] img {
  image-rendering: pixelated;
  border-radius: 8px;
}

.cn-header {
  padding: 0.25rem 0 0.75rem 0;
}

.cn-title {
  font-size: 1.9rem;
  font-weight: 600;
  letter-spacing: -0.02em;
}

.cn-subtitle {
  opacity: 0.7;
}

.cn-log {
  font-family: "IBM Plex Mono", ui-monospace, monospace;
  font-size: 0.85rem;
  white-space: pre;
  opacity: 0.85;
}

[data-testid="stSidebar"] {
  border-right: 1px solid rgba(17, 24, 39, 0.08);
}
"""


def inject_global_styles() -> None:
    st.markdown(f"<style>{APP_CSS}</style>", unsafe_allow_html=True)


def header(title: str, subtitle: str) -> None:
    st.markdown(
        f"""
        <div class="cn-header">
          <div class="cn-title">{html.escape(title)}</div>
          <div class="cn-subtitle">{html.escape(subtitle)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def log_block(lines: list[str]) -> None:
    text = html.escape("\n".join(lines))
    st.markdown(f'<div class="cn-log">{text}</div>', unsafe_allow_html=True)
