"""
Map Elements
============
Custom folium elements for the traffic map: bike lane overlays fetched by
the browser, and the time filter slider that restyles station markers.
"""

import json
from typing import Dict, List

from branca.element import MacroElement
from jinja2 import Template

from ..config import BIKE_LANE_OPACITY, BIKE_LANE_WEIGHT, MINUTES_PER_DAY, NO_FILTER
from ..utils.html_builder import get_control_styles, get_legend_html


class BikeLaneOverlay(MacroElement):
    """
    GeoJSON line layer loaded from a URL in the browser.

    The data is never fetched or embedded at build time.
    """

    _template = Template("""
        {% macro script(this, kwargs) %}
        fetch({{ this.url_json }})
            .then(function(response) { return response.json(); })
            .then(function(data) {
                L.geoJSON(data, {
                    style: {
                        color: {{ this.color_json }},
                        weight: {{ this.weight }},
                        opacity: {{ this.opacity }}
                    }
                }).addTo({{ this._parent.get_name() }});
            })
            .catch(function(error) {
                console.error("Failed to load {{ this.layer_name }}:", error);
            });
        {% endmacro %}
    """)

    def __init__(self, url: str, color: str, name: str = "Bike lanes",
                 weight: float = BIKE_LANE_WEIGHT, opacity: float = BIKE_LANE_OPACITY):
        super().__init__()
        self._name = 'BikeLaneOverlay'
        self.url_json = json.dumps(url)
        self.color_json = json.dumps(color)
        self.layer_name = name
        self.weight = weight
        self.opacity = opacity


class TimeSliderControl(MacroElement):
    """
    Slider that filters station traffic by time of day.

    Marker states are pre-computed for NO_FILTER and every `step` minutes.
    The slider thumb snaps to the nearest computed state, which supplies the
    radius, fill color and tooltip for each marker.
    """

    _template = Template("""
        {% macro header(this, kwargs) %}
        <style>{{ this.styles }}</style>
        {% endmacro %}

        {% macro html(this, kwargs) %}
        <div class="time-filter">
            <label>Filter by time:
                <input id="time-slider" type="range" min="{{ this.no_filter }}" max="{{ this.max_minute }}" value="{{ this.no_filter }}">
            </label>
            <time id="selected-time"></time>
            <em id="any-time">(any time)</em>
            {{ this.legend }}
        </div>
        {% endmacro %}

        {% macro script(this, kwargs) %}
        (function() {
            const markers = [{% for name in this.marker_names %}{{ name }}{% if not loop.last %}, {% endif %}{% endfor %}];
            const states = {{ this.states_json }};
            const noFilter = {{ this.no_filter }};
            const step = {{ this.step }};
            const lastKey = {{ this.last_key }};

            const slider = document.getElementById('time-slider');
            const selectedTime = document.getElementById('selected-time');
            const anyTime = document.getElementById('any-time');

            function stateKey(value) {
                if (value === noFilter) {
                    return noFilter;
                }
                return Math.min(Math.round(value / step) * step, lastKey);
            }

            function applyState(value) {
                const key = stateKey(value);
                const state = states[String(key)];
                slider.value = key;
                selectedTime.textContent = state.label;
                anyTime.style.display = key === noFilter ? 'block' : 'none';

                markers.forEach(function(marker, i) {
                    const arrivals = state.arrivals[i];
                    const departures = state.departures[i];
                    marker.setRadius(state.radius[i]);
                    marker.setStyle({ fillColor: state.fill[i] });
                    marker.setTooltipContent(
                        `${arrivals + departures} trips (${departures} departures, ${arrivals} arrivals)`
                    );
                });
            }

            slider.addEventListener('input', function() {
                applyState(Number(slider.value));
            });
            applyState(Number(slider.value));
        })();
        {% endmacro %}
    """)

    def __init__(self, marker_names: List[str], states: Dict[str, dict], step: int):
        super().__init__()
        self._name = 'TimeSliderControl'
        self.marker_names = marker_names
        self.states_json = json.dumps(states, separators=(',', ':'))
        self.step = step
        self.last_key = max(int(k) for k in states)
        self.no_filter = NO_FILTER
        self.max_minute = MINUTES_PER_DAY - 1
        self.styles = get_control_styles()
        self.legend = get_legend_html()
