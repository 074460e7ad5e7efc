import datetime

import pytest

from trade_flow_history.persistence import save_to_file
from trade_flow_history.renderer import Renderer

D = datetime.date


@pytest.fixture
def client(tmp_path, monthly_store):
    store = monthly_store(24, value=lambda i: 100 * i)
    save_to_file(store, tmp_path / "city.snapshots")
    (tmp_path / "broken.snapshots").write_bytes(b"\x01\x00\x00\x00\x00")
    renderer = Renderer(render_logs_dir=str(tmp_path))
    renderer.add_metric("Latest Imported Goods", lambda df: f"{df['import_goods'].iloc[-1]}")
    return renderer.app.test_client()


def test_index_lists_saved_histories(client):
    assert client.get("/").get_json() == ["broken.snapshots", "city.snapshots"]


def test_chart_payload(client):
    response = client.get("/chart/city.snapshots/import")
    assert response.status_code == 200
    payload = response.get_json()
    assert len(payload["dates"]) == 24
    assert len(payload["curves"]) == 6
    assert payload["options"] == []
    assert payload["y_gridlines"][-1]["label"] == "3,000"


def test_chart_errors(client):
    assert client.get("/chart/missing.snapshots/import").status_code == 404
    assert client.get("/chart/city.snapshots/sideways").status_code == 400
    assert client.get("/chart/city.snapshots/import?window=last_5").status_code == 400
    assert client.get("/chart/broken.snapshots/import").status_code == 422


def test_tooltip(client):
    payload = client.get("/chart/city.snapshots/export").get_json()
    x, y = payload["curves"][0]["points"][-1]
    response = client.get(f"/tooltip/city.snapshots/export?x={x}&y={y}")
    assert response.get_json() == {"tooltip": "Goods (01/12/2001  :  2,300)"}

    assert client.get("/tooltip/city.snapshots/export?x=0.5").status_code == 400


def test_metrics(client):
    metrics = client.get("/metrics/city.snapshots").get_json()
    assert metrics == [
        {"name": "Months Recorded", "value": "24"},
        {"name": "Months Without Data", "value": "0"},
        {"name": "Latest Imported Goods", "value": "2300"},
    ]
