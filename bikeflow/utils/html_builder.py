"""
HTML Builder Utilities
======================
Shared markup for the time filter control, the legend and SVG snapshots.
"""

from html import escape
from typing import Iterable

from ..config import FLOW_COLORS, MARKER_STYLE


def get_control_styles() -> str:
    """
    Return the CSS for the time filter panel and legend.

    Includes:
    - Floating panel over the map
    - Slider, selected time and "(any time)" indicator
    - Flow legend swatches
    """
    return '''
        .time-filter {
            position: fixed;
            top: 16px;
            right: 16px;
            z-index: 1000;
            background: rgba(255, 255, 255, 0.95);
            padding: 12px 16px;
            border-radius: 10px;
            box-shadow: 0 4px 20px rgba(0, 0, 0, 0.15);
            font-family: 'Segoe UI', system-ui, sans-serif;
            font-size: 14px;
            color: #333;
            min-width: 260px;
        }

        .time-filter label {
            display: flex;
            align-items: baseline;
            gap: 8px;
            font-weight: 600;
        }

        .time-filter input[type="range"] {
            flex: 1;
        }

        .time-filter time,
        .time-filter em {
            display: block;
            text-align: right;
            margin-top: 4px;
        }

        .time-filter em {
            color: #888;
            font-style: italic;
        }

        .legend {
            display: flex;
            gap: 12px;
            margin-top: 10px;
            padding-top: 10px;
            border-top: 1px solid #eee;
            font-size: 12px;
        }

        .legend-item {
            display: flex;
            align-items: center;
            gap: 6px;
        }

        .legend-swatch {
            width: 12px;
            height: 12px;
            border-radius: 50%;
            border: 1px solid #fff;
        }
    '''


def get_legend_html() -> str:
    """Legend for the three flow buckets."""
    items = [
        (FLOW_COLORS[1], 'More departures'),
        (FLOW_COLORS[0.5], 'Balanced'),
        (FLOW_COLORS[0], 'More arrivals'),
    ]
    swatches = ''.join(
        f'<div class="legend-item"><div class="legend-swatch" style="background: {color};"></div>'
        f'<span>{label}</span></div>'
        for color, label in items
    )
    return f'<div class="legend">{swatches}</div>'


def svg_circle(cx: float, cy: float, radius: float, fill: str, title: str) -> str:
    """One station marker as an SVG circle with a hover title."""
    return (
        f'<circle cx="{cx:.1f}" cy="{cy:.1f}" r="{radius:.2f}" fill="{fill}" '
        f'fill-opacity="{MARKER_STYLE["fill_opacity"]}" stroke="{MARKER_STYLE["color"]}" '
        f'stroke-width="{MARKER_STYLE["weight"]}" opacity="{MARKER_STYLE["opacity"]}">'
        f'<title>{escape(title)}</title></circle>'
    )


def build_svg_document(
    width: int,
    height: int,
    circles: Iterable[str],
    title: str,
    subtitle: str = ""
) -> str:
    """
    Generate a standalone SVG document.

    Args:
        width, height: Canvas size in pixels
        circles: Pre-rendered <circle> elements
        title: Heading drawn in the top-left corner
        subtitle: Optional second line under the heading

    Returns:
        Complete SVG document as string
    """
    body = '\n    '.join(circles)
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">
    <rect width="100%" height="100%" fill="#f1f5f9"/>
    <text x="16" y="28" font-family="system-ui, sans-serif" font-size="18" font-weight="700" fill="#0f172a">{escape(title)}</text>
    <text x="16" y="48" font-family="system-ui, sans-serif" font-size="13" fill="#475569">{escape(subtitle)}</text>
    {body}
</svg>
'''
