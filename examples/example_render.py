"""Serve the saved histories with the Flask renderer.

Run ``examples/example_simulation.py`` first to produce
``render_logs/example.snapshots``, then open
``http://127.0.0.1:5000/chart/example.snapshots/import``.
"""

import sys

sys.path.append("./src")

from trade_flow_history.config import load_config
from trade_flow_history.logs import configure
from trade_flow_history.renderer import Renderer

config = load_config()
configure(config.log)

renderer = Renderer(render_logs_dir="render_logs", config=config.view)


# Add a custom metric: latest exported goods
def latest_export_goods(df):
    values = df["export_goods"].dropna()
    return "n/a" if values.empty else f"{int(values.iloc[-1]):,}"


renderer.add_metric(name="Latest Exported Goods", function=latest_export_goods)
renderer.run()
