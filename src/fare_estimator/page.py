"""Browser page: the map plus the search form, location trigger and result region."""

from branca.element import MacroElement
from jinja2 import Template

from .overlays import FoliumMap


class FareControls(MacroElement):
    """Wires the page's inputs and the map's click event to the JSON endpoints.

    After an interaction reaches ``ready`` the page reloads so the server-side
    overlays are redrawn; on load it shows the last result from ``/result``.
    """

    _template = Template("""
{% macro header(this, kwargs) %}
<style>
    #fare-controls {
        position: absolute; top: 10px; right: 10px; z-index: 1000;
        width: 320px; padding: 10px; background: white;
        border-radius: 4px; box-shadow: 0 1px 5px rgba(0, 0, 0, 0.4);
        font: 14px sans-serif;
    }
    #fare-controls input { width: 100%; box-sizing: border-box; margin-bottom: 6px; }
    #fare-controls #result { margin-top: 8px; }
    #fare-controls #result button { display: block; width: 100%; margin-top: 4px; text-align: left; }
</style>
{% endmacro %}

{% macro html(this, kwargs) %}
<div id="fare-controls">
    <form id="fare-form">
        <input id="destination-input" type="text" placeholder="Destination">
        <button id="calc-button" type="submit">Calculate</button>
        <button id="location-button" type="button">Use my location</button>
    </form>
    <div id="result"></div>
</div>
{% endmacro %}

{% macro script(this, kwargs) %}
(function () {
    var map = {{ this._parent.get_name() }};
    var input = document.getElementById("destination-input");
    var result = document.getElementById("result");
    var geolocationErrors = {1: "permission_denied", 2: "position_unavailable", 3: "timeout"};

    function render(display) {
        if (display.destination_input) {
            input.value = display.destination_input;
        }
        result.innerHTML = "";
        var title = document.createElement("strong");
        title.textContent = display.message;
        result.appendChild(title);
        display.lines.forEach(function (line) {
            var row = document.createElement("div");
            row.textContent = line;
            result.appendChild(row);
        });
        display.options.forEach(function (option) {
            var button = document.createElement("button");
            button.textContent = option.label;
            button.onclick = function () {
                post("/select", {handle: option.handle});
            };
            result.appendChild(button);
        });
    }

    function post(path, body) {
        return fetch(path, {
            method: "POST",
            headers: {"Content-Type": "application/json"},
            body: JSON.stringify(body)
        }).then(function (response) {
            if (!response.ok) {
                throw new Error(response.statusText);
            }
            return response.json();
        }).then(function (display) {
            if (display.state === "ready") {
                window.location.reload();
            } else {
                render(display);
            }
        }).catch(function () {
            result.textContent = "Request failed.";
        });
    }

    document.getElementById("fare-form").addEventListener("submit", function (event) {
        event.preventDefault();
        result.textContent = "Searching for location...";
        post("/search", {query: input.value});
    });

    document.getElementById("location-button").addEventListener("click", function () {
        if (!navigator.geolocation) {
            post("/locate", {error: "unsupported"});
            return;
        }
        result.textContent = "Requesting your location...";
        navigator.geolocation.getCurrentPosition(
            function (position) {
                post("/locate", {lat: position.coords.latitude, lon: position.coords.longitude});
            },
            function (error) {
                post("/locate", {error: geolocationErrors[error.code] || "position_unavailable"});
            }
        );
    });

    map.on("click", function (event) {
        var point = event.latlng.wrap();
        result.textContent = "Looking up address...";
        post("/click", {lat: point.lat, lon: point.lng});
    });

    fetch("/result").then(function (response) {
        return response.json();
    }).then(render);
})();
{% endmacro %}
""")

    def __init__(self):
        super().__init__()
        self._name = "FareControls"


def render_page(map_widget: FoliumMap) -> str:
    """Return the interactive page for the current map state."""
    m = map_widget.build()
    FareControls().add_to(m)
    return m.get_root().render()
