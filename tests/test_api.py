from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from app.main import create_app
from conftest import TODAY


def _create_rm(client, name, **extra):
    body = {"name": name, "email": name.lower().replace(" ", ".") + "@company.com", **extra}
    resp = client.post("/rms", json=body)
    assert resp.status_code == 201
    return resp.json()


def _create_invoice(client, due_in_days=30, **extra):
    body = {
        "customer_name": "Acme Traders",
        "due_date": (TODAY + timedelta(days=due_in_days)).isoformat(),
        "unit_amount": "1000",
        **extra,
    }
    resp = client.post("/invoices", json=body)
    assert resp.status_code == 201
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_default_app_starts_with_mock_rms():
    with TestClient(create_app()) as c:
        names = [rm["name"] for rm in c.get("/rms").json()]
    assert names == ["John Smith", "Sarah Johnson", "Michael Brown"]


def test_create_invoice_assigns_round_robin(client):
    r1 = _create_rm(client, "Ravi Kumar")
    r2 = _create_rm(client, "Sarah Johnson")

    created = [_create_invoice(client) for _ in range(3)]

    assert [inv["assigned_rm"] for inv in created] == [r1["id"], r2["id"], r1["id"]]
    assert created[0]["assignment_status"] == "Pending"
    assert Decimal(created[0]["total_amount"]) == Decimal("1180")
    assert created[0]["amount"] == created[0]["total_amount"]


def test_create_invoice_without_rms_is_unassigned(client):
    inv = _create_invoice(client)
    assert inv["assigned_rm"] is None


def test_create_invoice_rejects_bad_payload(client):
    resp = client.post(
        "/invoices",
        json={"customer_name": "", "due_date": TODAY.isoformat(), "unit_amount": "0"},
    )
    assert resp.status_code == 422


def test_create_rm_rejects_bad_email(client):
    resp = client.post("/rms", json={"name": "Ravi", "email": "not-an-email"})
    assert resp.status_code == 422


def test_list_and_filter_invoices(client):
    _create_rm(client, "Ravi Kumar")
    first = _create_invoice(client, customer_name="Globex Retail")
    _create_invoice(client, customer_name="Initech", due_in_days=-3)

    all_items = client.get("/invoices").json()
    assert all_items["total"] == 2

    by_name = client.get("/invoices", params={"q": "globex"}).json()
    assert [i["id"] for i in by_name["items"]] == [first["id"]]

    overdue = client.get("/invoices", params={"status": "overdue"}).json()
    assert [i["customer_name"] for i in overdue["items"]] == ["Initech"]

    assert client.get("/invoices", params={"status": "Lost"}).status_code == 400


def test_patch_invoice(client):
    inv = _create_invoice(client)

    resp = client.patch(
        f"/invoices/{inv['id']}",
        json={"payment_status": "Paid", "remarks": "Paid via NEFT"},
    )

    assert resp.status_code == 200
    assert resp.json()["payment_status"] == "Paid"
    assert resp.json()["remarks"] == "Paid via NEFT"


def test_unknown_ids_return_404(client):
    rm = _create_rm(client, "Ravi Kumar")
    inv = _create_invoice(client)

    assert client.get("/invoices/INV-404").status_code == 404
    assert client.patch("/invoices/INV-404", json={"remarks": "x"}).status_code == 404
    assert client.get("/rms/RM-404").status_code == 404
    assert client.patch("/rms/RM-404", json={"is_active": False}).status_code == 404
    assert client.get("/rms/RM-404/summary").status_code == 404
    assert (
        client.post(f"/invoices/{inv['id']}/reassign", json={"rm_id": "RM-404"}).status_code
        == 404
    )
    assert (
        client.post("/invoices/INV-404/reassign", json={"rm_id": rm["id"]}).status_code == 404
    )


def test_reassign_invoice_moves_counters(client):
    r1 = _create_rm(client, "Ravi Kumar")
    r2 = _create_rm(client, "Sarah Johnson")
    inv = _create_invoice(client)

    resp = client.post(f"/invoices/{inv['id']}/reassign", json={"rm_id": r2["id"]})

    assert resp.status_code == 200
    assert resp.json()["assignment_status"] == "Reassigned"
    assert resp.json()["assigned_rm_name"] == "Sarah Johnson"
    assert client.get(f"/rms/{r1['id']}").json()["assigned_invoices"] == 0
    assert client.get(f"/rms/{r2['id']}").json()["assigned_invoices"] == 1


def test_leave_toggle_removes_rm_from_rotation(client):
    r1 = _create_rm(client, "Ravi Kumar")
    r2 = _create_rm(client, "Sarah Johnson")

    client.patch(f"/rms/{r1['id']}", json={"is_on_leave": True})

    active = client.get("/rms/active").json()
    assert [rm["id"] for rm in active] == [r2["id"]]
    assert _create_invoice(client)["assigned_rm"] == r2["id"]


def test_record_payment_endpoint(client):
    inv = _create_invoice(client)

    resp = client.post(
        f"/invoices/{inv['id']}/payments",
        json={"amount_paid": "1180", "payment_mode": "UPI", "payment_reference": "UTR-9"},
    )

    assert resp.status_code == 201
    assert Decimal(resp.json()["balance_amount"]) == Decimal("0")
    assert client.get(f"/invoices/{inv['id']}").json()["payment_status"] == "Paid"
    assert len(client.get(f"/invoices/{inv['id']}/payments").json()) == 1


def test_stats_and_reports(client):
    rm = _create_rm(client, "Ravi Kumar")
    late = _create_invoice(client, due_in_days=-45)
    _create_invoice(client, due_in_days=10)
    client.patch(f"/invoices/{late['id']}", json={"remarks": "chasing"})

    stats = client.get("/stats").json()
    assert stats["total_invoices"] == 2
    assert stats["overdue_invoices"] == 1
    assert stats["assigned_today"] == 2
    assert Decimal(stats["pending_amount"]) == Decimal("2360")

    aging = client.get("/reports/aging").json()
    assert aging == {"current": 1, "1-30": 0, "31-60": 1, "60+": 0}

    ranking = client.get("/reports/rm-performance").json()
    assert ranking[0]["rm_id"] == rm["id"]
    assert ranking[0]["total_invoices"] == 2

    overdue = client.get("/reports/overdue", params={"limit": 5}).json()
    assert overdue["total"] == 1
    assert overdue["items"][0]["id"] == late["id"]
    assert overdue["items"][0]["days_past_due"] == 45

    summary = client.get(f"/rms/{rm['id']}/summary").json()
    assert summary["total_assigned"] == 2
    assert summary["overdue_invoices"] == 1


def test_patch_amount_paid_keeps_balance_in_step(client):
    inv = _create_invoice(client)

    resp = client.patch(f"/invoices/{inv['id']}", json={"amount_paid": "500"})
    assert resp.status_code == 200
    assert Decimal(resp.json()["balance_amount"]) == Decimal("680")

    resp = client.patch(f"/invoices/{inv['id']}", json={"balance_amount": "5"})
    body = resp.json()
    assert Decimal(body["balance_amount"]) == Decimal(body["total_amount"]) - Decimal(
        body["amount_paid"]
    )


def test_report_summary_endpoint(client):
    _create_rm(client, "Ravi Kumar")
    _create_rm(client, "Sarah Johnson", is_on_leave=True)
    paid = _create_invoice(client, invoice_date=(TODAY - timedelta(days=20)).isoformat())
    _create_invoice(client, due_in_days=-5)
    _create_invoice(client, due_in_days=-1)
    _create_invoice(client)
    client.post(
        f"/invoices/{paid['id']}/payments",
        json={"amount_paid": "1180", "payment_mode": "Cheque", "payment_reference": "CHQ-7"},
    )

    summary = client.get("/reports/summary").json()

    assert summary == {
        "total_invoices": 4,
        "collection_rate": 25,
        "overdue_rate": 50,
        "active_rms": 1,
        "average_days_to_pay": 20,
    }


def test_report_summary_with_no_invoices(client):
    summary = client.get("/reports/summary").json()

    assert summary["collection_rate"] == 0
    assert summary["overdue_rate"] == 0
    assert summary["active_rms"] == 0
    assert summary["average_days_to_pay"] is None
