"""Flask-based renderer to visualize saved resource histories.

This module exposes a small Flask app that serves the chart payloads of
snapshot blobs saved with ``persistence.save_to_file``. A front end draws the
gridlines, labels and curve segments it receives and asks the server for
tooltip text as the cursor moves.
"""

import glob
from pathlib import Path

from flask import Flask, abort, jsonify, request

from .categories import Direction
from .config import ViewConfig
from .history_view import HISTORY_WINDOWS, HistoryView
from .persistence import SnapshotDataError, load_from_file

BLOB_SUFFIX = ".snapshots"


class Renderer:
    """Render server that serves charts and metrics from saved histories.

    Args:
        render_logs_dir (str): Directory containing ``.snapshots`` blobs.
        config (ViewConfig | None): Enabled categories and chart tunables.
    """

    def __init__(self, render_logs_dir, config=None):
        self.app = Flask(__name__)
        self.render_logs_dir = render_logs_dir
        self.config = config or ViewConfig()
        self.metrics = [
            {"name": "Months Recorded", "function": self._metric_months_recorded},
            {"name": "Months Without Data", "function": self._metric_months_without_data},
        ]
        self._register_routes()

    def add_metric(self, name, function):
        """Register a metric to be computed and displayed in the UI.

        Args:
            name (str): Human-readable name of the metric.
            function (callable): Function ``(pd.DataFrame) -> str`` returning a
                formatted textual value.
        """
        self.metrics.append({"name": name, "function": function})

    @staticmethod
    def _metric_months_recorded(df):
        return f"{len(df)}"

    @staticmethod
    def _metric_months_without_data(df):
        return f"{int(df.isna().all(axis=1).sum())}"

    def compute_metrics(self, df):
        """Evaluate all registered metrics.

        Args:
            df (pandas.DataFrame): History as returned by
                ``SnapshotStore.to_dataframe``.

        Returns:
            list[dict]: ``{"name", "value"}`` per metric.
        """
        return [{"name": metric["name"], "value": metric["function"](df)} for metric in self.metrics]

    def render_names(self):
        render_pathes = sorted(glob.glob(f"{self.render_logs_dir}/*{BLOB_SUFFIX}"))
        return [Path(path).name for path in render_pathes]

    def _load(self, name):
        path = Path(self.render_logs_dir) / name
        if name not in self.render_names():
            abort(404, description=f"No saved history named {name}")
        try:
            return load_from_file(path)
        except SnapshotDataError as err:
            abort(422, description=str(err))

    def _view(self, name, direction):
        window = request.args.get("window", "all")
        if window not in HISTORY_WINDOWS:
            abort(400, description=f"Unknown history window {window}")
        try:
            direction = Direction(direction)
        except ValueError as err:
            abort(400, description=str(err))
        view = HistoryView(self._load(name), self.config)
        view.update(direction, window)
        return view

    def _register_routes(self):
        """Expose routes.

        Routes:
            - ``/``: Names of the available saved histories.
            - ``/chart/<name>/<direction>``: Chart payload, ``?window=`` optional.
            - ``/tooltip/<name>/<direction>``: Tooltip at ``?x=&y=`` (plot coordinates).
            - ``/metrics/<name>``: Computed metrics.
        """

        @self.app.route("/")
        def index():
            return jsonify(self.render_names())

        @self.app.route("/chart/<name>/<direction>")
        def chart(name, direction):
            view = self._view(name, direction)
            return jsonify({**view.chart.to_dict(), "options": view.options})

        @self.app.route("/tooltip/<name>/<direction>")
        def tooltip(name, direction):
            x = request.args.get("x", type=float)
            y = request.args.get("y", type=float)
            if x is None or y is None:
                abort(400, description="x and y are required")
            view = self._view(name, direction)
            return jsonify({"tooltip": view.chart.tooltip((x, y))})

        @self.app.route("/metrics/<name>")
        def get_metrics(name):
            return jsonify(self.compute_metrics(self._load(name).to_dataframe()))

    def run(self, **kwargs):
        """Start the Flask development server."""
        self.app.run(**kwargs)
