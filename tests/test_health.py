from __future__ import annotations


def test_health_ok(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_metrics_exposes_error_counter(client) -> None:
    client.get("/api/patients/00000000-0000-0000-0000-000000000000")

    res = client.get("/metrics")

    assert res.status_code == 200
    assert 'patient_errors_total{error="patient_not_found",status_code="404"}' in res.text
    assert 'route="/api/patients/{patient_id}"' in res.text
