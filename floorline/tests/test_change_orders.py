from decimal import Decimal

import pytest


async def _accepted_project(client, installer):
    project = await client.post("/api/v1/projects", json={"project_name": "CO Test"})
    project_id = project.json()["id"]
    quote = await client.post(
        f"/api/v1/projects/{project_id}/quotes",
        json={
            "installer_id": str(installer.id),
            "materials_amount": "0",
            "labor_amount": "1000",
            "labor_deposit_percentage": "20",
        },
    )
    quote_id = quote.json()["id"]
    await client.post(f"/api/v1/quotes/{quote_id}/accept")
    return project_id, quote_id


async def _deposit(client, project_id):
    job = (await client.get(f"/api/v1/projects/{project_id}/job")).json()
    return Decimal(job["deposit_amount"])


@pytest.mark.asyncio
async def test_create_change_order(client, installer):
    project_id, quote_id = await _accepted_project(client, installer)

    response = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Extra underlayment", "amount": "500", "type": "Labor", "quote_id": quote_id},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["description"] == "Extra underlayment"
    assert data["type"] == "Labor"
    assert data["amount"] == "500.00"
    assert data["quote_id"] == quote_id

    assert await _deposit(client, project_id) == Decimal("300")


@pytest.mark.asyncio
async def test_create_change_order_invalid_type(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    response = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Bad", "amount": "5", "type": "Permit"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_change_order_blank_description(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    response = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "  ", "amount": "5", "type": "Materials"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_order_quote_must_belong_to_project(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    _, other_quote = await _accepted_project(client, installer)

    response = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Wrong quote", "amount": "5", "type": "Materials", "quote_id": other_quote},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unassigned_change_order_only_moves_total(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Haul away", "amount": "150", "type": "Labor"},
    )

    summary = (await client.get(f"/api/v1/projects/{project_id}/financial-summary")).json()
    assert Decimal(summary["grand_total"]) == Decimal("1150")
    assert Decimal(summary["total_deposit"]) == Decimal("200")
    assert Decimal(summary["unassigned_change_orders_total"]) == Decimal("150")


@pytest.mark.asyncio
async def test_list_change_orders(client, installer):
    project_id, quote_id = await _accepted_project(client, installer)
    for description in ("Stair nosing", "Transition strips"):
        await client.post(
            f"/api/v1/projects/{project_id}/change-orders",
            json={"description": description, "amount": "40", "type": "Materials"},
        )

    response = await client.get(f"/api/v1/projects/{project_id}/change-orders")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["total_pages"] == 1

    response = await client.get(
        f"/api/v1/projects/{project_id}/change-orders", params={"search": "stair"}
    )
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_update_change_order(client, installer):
    project_id, quote_id = await _accepted_project(client, installer)
    create = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Trim", "amount": "100", "type": "Labor", "quote_id": quote_id},
    )
    co_id = create.json()["id"]

    response = await client.put(
        f"/api/v1/change-orders/{co_id}",
        json={"description": "Trim and paint", "amount": "100", "type": "Materials", "quote_id": quote_id},
    )
    assert response.status_code == 200
    assert response.json()["type"] == "Materials"
    assert await _deposit(client, project_id) == Decimal("300")


@pytest.mark.asyncio
async def test_delete_change_order(client, installer):
    project_id, quote_id = await _accepted_project(client, installer)
    create = await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Trim", "amount": "100", "type": "Materials", "quote_id": quote_id},
    )
    co_id = create.json()["id"]
    assert await _deposit(client, project_id) == Decimal("300")

    response = await client.delete(f"/api/v1/change-orders/{co_id}")
    assert response.status_code == 204
    assert await _deposit(client, project_id) == Decimal("200")

    response = await client.delete(f"/api/v1/change-orders/{co_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_change_orders_sorted(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    for amount in ("25", "300", "-40"):
        await client.post(
            f"/api/v1/projects/{project_id}/change-orders",
            json={"description": f"Adjust {amount}", "amount": amount, "type": "Materials"},
        )

    response = await client.get(
        f"/api/v1/projects/{project_id}/change-orders",
        params={"sort_by": "amount", "sort_order": "desc"},
    )
    assert [Decimal(i["amount"]) for i in response.json()["items"]] == [
        Decimal("300"), Decimal("25"), Decimal("-40"),
    ]

    response = await client.get(
        f"/api/v1/projects/{project_id}/change-orders", params={"sort_by": "is_deleted"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_order_on_rejected_quote_counts_as_unassigned(client, installer):
    project_id, _ = await _accepted_project(client, installer)
    rejected = await client.post(
        f"/api/v1/projects/{project_id}/quotes",
        json={"installer_id": str(installer.id), "materials_amount": "400"},
    )
    rejected_id = rejected.json()["id"]
    await client.post(f"/api/v1/quotes/{rejected_id}/reject")
    await client.post(
        f"/api/v1/projects/{project_id}/change-orders",
        json={"description": "Stairs", "amount": "75", "type": "Materials", "quote_id": rejected_id},
    )

    summary = (await client.get(f"/api/v1/projects/{project_id}/financial-summary")).json()
    assert Decimal(summary["grand_total"]) == Decimal("1075")
    assert Decimal(summary["unassigned_change_orders_total"]) == Decimal("75")
    assert await _deposit(client, project_id) == Decimal("200")
