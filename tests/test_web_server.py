from __future__ import annotations

from dominium.web_server import create_app


def test_round_trip_add_product_then_add_to_caja(client, sheets):
    body = {"codigo": "P100", "nombre": "Galletas", "precio_sugerido_venta": "1500", "detalle": "Chocolate"}

    r = client.post("/api/add-product", json=body)
    assert r.status_code == 200
    assert r.get_json() == {"ok": True}

    r = client.post("/api/add-to-caja", json={"codigo": "P100"})
    assert r.status_code == 200
    assert r.get_json() == {"ok": True, "product": body}
    assert sheets.tables["Cajas"][-1] == ["P100", "Galletas", "1500", "Chocolate", "1"]


def test_add_product_twice_reports_existing(client, sheets):
    body = {"codigo": "D1", "nombre": "Dulce", "precio_sugerido_venta": "10"}
    client.post("/api/add-product", json=body)
    rows_before = len(sheets.tables["Productos"])

    r = client.post("/api/add-product", json={**body, "nombre": "Otro"})

    data = r.get_json()
    assert r.status_code == 200
    assert data["ok"] is True
    assert data["already_exists"] is True
    assert data["product"] == {"codigo": "D1", "nombre": "Dulce", "precio_sugerido_venta": "10", "detalle": ""}
    assert len(sheets.tables["Productos"]) == rows_before


def test_add_to_caja_unknown_code_is_404(client):
    r = client.post("/api/add-to-caja", json={"codigo": "never-added"})

    assert r.status_code == 404
    assert r.get_json() == {"ok": False, "error": "Producto no existe en Productos"}


def test_missing_fields_are_400_and_named(client):
    cases = [
        ({"nombre": "n", "precio_sugerido_venta": "1"}, "codigo"),
        ({"codigo": "c", "precio_sugerido_venta": "1"}, "nombre"),
        ({"codigo": "c", "nombre": "n"}, "precio_sugerido_venta"),
    ]
    for body, field_name in cases:
        r = client.post("/api/add-product", json=body)
        assert r.status_code == 400
        assert r.get_json() == {"ok": False, "error": f"{field_name} requerido"}


def test_detalle_is_optional(client, sheets):
    r = client.post("/api/add-product", json={"codigo": "S1", "nombre": "Sal", "precio_sugerido_venta": "300"})

    assert r.status_code == 200
    assert sheets.tables["Productos"][-1] == ["S1", "Sal", "300", ""]


def test_add_to_caja_requires_codigo(client):
    r = client.post("/api/add-to-caja", json={})

    assert r.status_code == 400
    assert r.get_json() == {"ok": False, "error": "codigo requerido"}


def test_empty_body_is_treated_as_empty_object(client):
    r = client.post("/api/add-to-caja", data=b"")

    assert r.status_code == 400
    assert r.get_json()["error"] == "codigo requerido"


def test_malformed_json_is_400(client, sheets):
    for raw in (b"{not json", b"[1, 2]"):
        r = client.post("/api/add-product", data=raw, content_type="application/json")
        assert r.status_code == 400
        assert r.get_json()["ok"] is False
    assert sheets.reads == []


def test_lookup_is_trimmed_and_case_sensitive(client):
    assert client.post("/api/add-to-caja", json={"codigo": " A1 "}).status_code == 200
    assert client.post("/api/add-to-caja", json={"codigo": "a1"}).status_code == 404


def test_backend_error_is_500_with_message(client, sheets):
    sheets.fail_with = "Quota exceeded for quota metric 'Read requests'"

    r = client.post("/api/add-to-caja", json={"codigo": "A1"})

    assert r.status_code == 500
    assert r.get_json() == {"ok": False, "error": "Quota exceeded for quota metric 'Read requests'"}

    sheets.fail_with = None
    assert client.post("/api/add-to-caja", json={"codigo": "A1"}).status_code == 200


def test_unexpected_error_is_500(settings):
    class Broken:
        def read_range(self, range_spec):
            raise RuntimeError("boom")

    app = create_app(settings, Broken())
    r = app.test_client().post("/api/add-to-caja", json={"codigo": "A1"})

    assert r.status_code == 500
    assert r.get_json() == {"ok": False, "error": "boom"}


def test_missing_credentials_is_500_with_readable_message(settings):
    app = create_app(settings)

    r = app.test_client().post(
        "/api/add-product",
        json={"codigo": "X", "nombre": "Y", "precio_sugerido_venta": "1"},
    )

    assert r.status_code == 500
    data = r.get_json()
    assert data["ok"] is False
    assert "credenciales" in data["error"]


def test_index_is_served_as_html(client):
    for path in ("/", "/index.html"):
        r = client.get(path)
        assert r.status_code == 200
        assert r.mimetype == "text/html"
        assert b"Dominium" in r.data


def test_index_missing_is_404(settings, sheets, tmp_path):
    settings.INDEX_HTML.unlink()
    r = create_app(settings, sheets).test_client().get("/")

    assert r.status_code == 404


def test_favicon_is_204(client, sheets):
    sheets.fail_with = "down"

    r = client.get("/favicon.ico")

    assert r.status_code == 204
    assert r.data == b""


def test_unknown_paths_are_404_not_found(client):
    for method, path in (
        ("get", "/nope"),
        ("post", "/api/unknown"),
        ("get", "/api/add-product"),
        ("options", "/api/add-product"),
        ("options", "/"),
    ):
        r = getattr(client, method)(path)
        assert r.status_code == 404
        assert r.data == b"Not found"


def test_health(client, settings):
    r = client.get("/health")

    assert r.get_json() == {"ok": True, "app": settings.APP_NAME}
