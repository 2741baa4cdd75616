import json

from fastapi.testclient import TestClient

import main as entry
from backend.app.main import app

client = TestClient(app)


# ── HTTP API ────────────────────────────────────────────────────────────

def test_classify_endpoint() -> None:
    response = client.post("/api/classify", json={"equation": "x^2 + y^2 = 4"})
    assert response.status_code == 200
    body = response.json()
    assert body["identity"] == "Ellipse"
    assert body["features"]["radius"] == "2"
    assert body["summary"]["library"].startswith("SymPy")


def test_classify_endpoint_with_bounds() -> None:
    bounds = {"left": -2.0, "right": 2.0, "top": 2.0, "bottom": -2.0}
    response = client.post("/api/classify", json={"equation": "y = x", "bounds": bounds})
    assert response.status_code == 200
    assert response.json()["bounds"] == bounds


def test_classify_endpoint_errors() -> None:
    empty = client.post("/api/classify", json={"equation": "  "})
    assert empty.status_code == 400
    assert empty.json()["detail"] == "Equation cannot be empty."

    crowded = client.post("/api/classify", json={"equation": "x + y + z = 1"})
    assert crowded.status_code == 400
    assert "Too many variables" in crowded.json()["detail"]


def test_classify_data_endpoint() -> None:
    points = [[x / 10.0, (x / 10.0) ** 2] for x in range(-30, 31)]
    response = client.post("/api/classify-data", json={"points": points, "name": "parabola"})
    assert response.status_code == 200
    body = response.json()
    assert body["equation"] == "parabola"
    assert body["identity"] == "EquationData"


def test_classify_data_endpoint_multi_valued_points() -> None:
    points = [[0.0, [1.0, -1.0]], [1.0, [2.0, -2.0]], [2.0, [3.0, -3.0]]]
    response = client.post("/api/classify-data", json={"points": points})
    assert response.status_code == 200
    assert response.json()["equation"] == "data"


def test_classify_data_endpoint_empty() -> None:
    response = client.post("/api/classify-data", json={"points": []})
    assert response.status_code == 400
    assert response.json()["detail"] == "Data cannot be empty."


# ── Command line ────────────────────────────────────────────────────────

def test_main_prints_identity_and_xml(capsys) -> None:
    assert entry.main(["y = x^2"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("y = x^2: Parabola")
    assert "<MDE>" in out


def test_main_json_output(capsys) -> None:
    assert entry.main(["--json", "y = 2x + 1"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["identity"] == "SlopingLine"


def test_main_reads_data_file(tmp_path, capsys) -> None:
    path = tmp_path / "samples.csv"
    path.write_text("\n".join(f"{x},{x * x}" for x in range(-5, 6)))
    assert entry.main(["--json", "--data", str(path)]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["identity"] == "EquationData"


def test_main_without_input_fails(capsys) -> None:
    assert entry.main([]) == 1
    assert "Nothing to classify" in capsys.readouterr().err


def test_main_reports_errors(capsys) -> None:
    assert entry.main(["x + y + z = 1"]) == 1
    assert "Too many variables" in capsys.readouterr().err


def test_main_single_column_file(tmp_path, capsys) -> None:
    path = tmp_path / "column.txt"
    path.write_text("1\n2\n3\n")
    assert entry.main(["--data", str(path)]) == 1
    assert "two columns" in capsys.readouterr().err
