from decimal import Decimal

from fastapi.testclient import TestClient


def account_id(client: TestClient, code: str) -> int:
    response = client.get("/api/accounts", params={"q": code})
    return next(a["id"] for a in response.json() if a["code"] == code)


def balance(client: TestClient, code: str) -> Decimal:
    return Decimal(client.get(f"/api/accounts/{account_id(client, code)}").json()["balance"])


def test_root(client: TestClient):
    assert client.get("/").json() == {"status": "ok"}


def test_chart_of_accounts_crud(client: TestClient):
    listed = client.get("/api/accounts", params={"type": "LIABILITY"})
    assert listed.status_code == 200
    assert [a["code"] for a in listed.json()] == ["2010", "2020", "2030"]

    created = client.post("/api/accounts", json={"name": "بانک ملت", "type": "ASSET"})
    assert created.status_code == 201
    assert created.json()["code"] == "1080"

    duplicate = client.post("/api/accounts", json={"name": "Dup", "code": "1010", "type": "ASSET"})
    assert duplicate.status_code == 400

    account = created.json()["id"]
    updated = client.patch(f"/api/accounts/{account}", json={"name": "بانک ملت شعبه مرکزی"})
    assert updated.json()["name"] == "بانک ملت شعبه مرکزی"

    assert client.delete(f"/api/accounts/{account}").json() == {"status": "ok"}
    assert client.get(f"/api/accounts/{account}").status_code == 404


def test_purchase_approval_flow(client: TestClient):
    created = client.post(
        "/api/purchases",
        json={"amount": "1500000", "category": "هزینه مواد اولیه", "payment_account_id": account_id(client, "1010")},
    )
    assert created.status_code == 201
    purchase = created.json()
    assert purchase["status"] == "PENDING"

    approved = client.post(f"/api/purchases/{purchase['id']}/approve", json={})
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    entries = client.get("/api/journal-entries", params={"source_type": "PURCHASE", "source_id": purchase["id"]}).json()
    assert len(entries) == 1
    assert Decimal(entries[0]["total_debit"]) == Decimal("1500000")
    assert balance(client, "1010") == Decimal("-1500000")

    again = client.post(f"/api/purchases/{purchase['id']}/approve", json={})
    assert again.status_code == 400

    assert client.delete(f"/api/purchases/{purchase['id']}").status_code == 204
    assert balance(client, "1010") == 0


def test_sale_edit_returns_new_record(client: TestClient):
    created = client.post(
        "/api/sales",
        json={"stream": "CAFE", "gross_amount": "4800000", "discount": "300000", "cash_amount": "4500000"},
    )
    assert created.status_code == 201
    sale = created.json()
    assert Decimal(sale["amount"]) == Decimal("4500000")

    edited = client.put(f"/api/sales/{sale['id']}", json={"gross_amount": "5000000", "cash_amount": "4700000"})
    assert edited.status_code == 200
    assert edited.json()["id"] != sale["id"]
    assert client.get(f"/api/sales/{sale['id']}").status_code == 404
    assert balance(client, "4010") == Decimal("5000000")
    assert balance(client, "1010") == Decimal("4700000")


def test_unbalanced_cafe_sale_is_rejected(client: TestClient):
    response = client.post("/api/sales", json={"stream": "CAFE", "gross_amount": "100", "cash_amount": "90"})
    assert response.status_code == 400
    assert "Receipts" in response.json()["detail"]


def test_subscription_flow(client: TestClient):
    customer = client.post("/api/customers", json={"name": "Shirin"}).json()
    created = client.post(
        "/api/subscriptions",
        json={
            "customer_id": customer["id"],
            "plan_name": "Lunch 12",
            "delivery_days": 12,
            "start_date": "2024-01-06",
            "price": "2000000",
        },
    )
    assert created.status_code == 201
    sale_id = created.json()["sale"]["id"]
    assert created.json()["subscription"]["status"] == "ACTIVE"

    recognized = client.post(f"/api/subscriptions/sales/{sale_id}/recognize", json={"amount": "500000"})
    assert recognized.status_code == 201
    deferred = client.get(f"/api/subscriptions/sales/{sale_id}/deferred").json()
    assert Decimal(deferred["remaining"]) == Decimal("1500000")

    cancelled = client.post(f"/api/sales/{sale_id}/cancel-subscription", json={"refund_amount": "500000"})
    assert cancelled.status_code == 200
    assert cancelled.json()["subscription_status"] == "CANCELLED"
    assert balance(client, "2020") == Decimal("1000000")


def test_manual_journal_entries(client: TestClient):
    cash = account_id(client, "1010")
    capital = account_id(client, "3010")

    unbalanced = client.post(
        "/api/journal-entries",
        json={
            "date": "2024-01-01",
            "lines": [
                {"account_id": cash, "direction": "DEBIT", "amount": "100"},
                {"account_id": capital, "direction": "CREDIT", "amount": "90"},
            ],
        },
    )
    assert unbalanced.status_code == 400

    created = client.post(
        "/api/journal-entries",
        json={
            "date": "2024-01-01",
            "memo": "Opening capital",
            "lines": [
                {"account_id": cash, "direction": "DEBIT", "amount": "100"},
                {"account_id": capital, "direction": "CREDIT", "amount": "100"},
            ],
        },
    )
    assert created.status_code == 201
    entry = created.json()
    assert entry["source_type"] == "MANUAL"

    assert client.delete(f"/api/journal-entries/{entry['id']}").status_code == 204
    assert client.get(f"/api/journal-entries/{entry['id']}").status_code == 404


def test_supplier_payment_and_ledger(client: TestClient):
    supplier = client.post("/api/suppliers", json={"name": "Fresh Fruit Co"}).json()
    purchase = client.post(
        "/api/purchases",
        json={"amount": "800000", "category": "هزینه مواد اولیه", "supplier_id": supplier["id"], "is_credit": True},
    ).json()
    client.post(f"/api/purchases/{purchase['id']}/approve", json={})

    paid = client.post(
        f"/api/suppliers/{supplier['id']}/payments",
        json={"account_id": account_id(client, "1020"), "amount": "300000"},
    )
    assert paid.status_code == 201
    assert paid.json()["to_type"] == "SUPPLIER"

    refreshed = client.get(f"/api/suppliers/{supplier['id']}").json()
    assert Decimal(refreshed["balance"]) == Decimal("500000")
    ledger = client.get(f"/api/suppliers/{supplier['id']}/ledger").json()
    assert [Decimal(row["delta"]) for row in ledger] == [Decimal("-300000"), Decimal("800000")]

    assert client.delete(f"/api/suppliers/{supplier['id']}").status_code == 400


def test_transfer_validation_and_not_found(client: TestClient):
    cash = account_id(client, "1010")
    same = client.post(
        "/api/transfers",
        json={"from_type": "ACCOUNT", "from_id": cash, "to_type": "ACCOUNT", "to_id": cash, "amount": "10"},
    )
    assert same.status_code == 422

    missing = client.post(
        "/api/transfers",
        json={"from_type": "ACCOUNT", "from_id": cash, "to_type": "EMPLOYEE", "to_id": 404, "amount": "10"},
    )
    assert missing.status_code == 400
    assert client.delete("/api/transfers/404").status_code == 404


def test_employee_payroll_and_loan_routes(client: TestClient):
    employee = client.post("/api/employees", json={"full_name": "Kian", "role": "chef"}).json()
    paid = client.post(
        "/api/payroll/payments",
        json={"employee_id": employee["id"], "total_amount": "1000", "payment_account_id": account_id(client, "1010")},
    )
    assert paid.status_code == 201
    assert balance(client, "5050") == Decimal("1000")

    loan = client.post(
        "/api/loans",
        json={
            "lender": "Bank Saderat",
            "amount": "5000",
            "start_date": "2024-02-01",
            "deposit_account_id": account_id(client, "1020"),
        },
    )
    assert loan.status_code == 201
    repayment = client.post(
        f"/api/loans/{loan.json()['id']}/repayments",
        json={"amount": "1000", "interest_amount": "100", "payment_account_id": account_id(client, "1020")},
    )
    assert repayment.status_code == 201
    assert Decimal(client.get(f"/api/loans/{loan.json()['id']}").json()["remaining_balance"]) == Decimal("4100")


def test_inventory_and_check_routes(client: TestClient):
    item = client.post("/api/inventory/items", json={"name": "Sugar", "unit": "kg", "min_stock": "2"}).json()
    bought = client.post(
        "/api/purchases/inventory",
        json={
            "inventory_item_id": item["id"],
            "inventory_quantity": "5",
            "inventory_unit_price": "20000",
            "payment_account_id": account_id(client, "1010"),
        },
    )
    assert bought.status_code == 201
    used = client.post("/api/inventory/usage", json={"item_id": item["id"], "quantity": "4"})
    assert used.status_code == 201
    assert client.get(f"/api/inventory/items/{item['id']}").json()["is_low_stock"] is True

    check = client.post(
        "/api/checks",
        json={"check_number": "1001", "amount": "50000", "payee": "Landlord", "due_date": "2024-06-01"},
    )
    assert check.status_code == 201
    passed = client.post(f"/api/checks/{check.json()['id']}/pass", json={})
    assert passed.json()["status"] == "PASSED"


def test_reports_routes(client: TestClient):
    client.post("/api/sales", json={"stream": "ASSESSMENT", "amount": "400000"})

    trial = client.get("/api/reports/trial-balance").json()
    assert trial["is_balanced"] is True
    summary = client.get("/api/reports/financial-summary").json()
    assert Decimal(summary["total_revenue"]) == Decimal("400000")
