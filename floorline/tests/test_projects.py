import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-Duration-Ms" in response.headers


@pytest.mark.asyncio
async def test_request_id_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_create_project(client):
    response = await client.post(
        "/api/v1/projects",
        json={"project_name": "Garcia Hallway", "project_type": "Flooring", "customer_name": "Ana Garcia"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["project_name"] == "Garcia Hallway"
    assert data["project_type"] == "Flooring"
    assert data["status"] == "New"


@pytest.mark.asyncio
async def test_list_projects_filtered_by_status(client):
    await client.post("/api/v1/projects", json={"project_name": "One"})
    second = await client.post("/api/v1/projects", json={"project_name": "Two"})
    await client.patch(f"/api/v1/projects/{second.json()['id']}", json={"status": "Quoting"})

    response = await client.get("/api/v1/projects")
    assert response.json()["total"] == 2

    response = await client.get("/api/v1/projects", params={"status": "Quoting"})
    data = response.json()
    assert data["total"] == 1
    assert data["projects"][0]["project_name"] == "Two"


@pytest.mark.asyncio
async def test_get_project_not_found(client):
    response = await client.get("/api/v1/projects/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_project(client):
    create = await client.post("/api/v1/projects", json={"project_name": "Patel Basement"})
    project_id = create.json()["id"]

    response = await client.patch(
        f"/api/v1/projects/{project_id}",
        json={"final_choice": "Oak LVP", "status": "Sample Checkout"},
    )
    assert response.status_code == 200
    assert response.json()["final_choice"] == "Oak LVP"
    assert response.json()["status"] == "Sample Checkout"


@pytest.mark.asyncio
async def test_scheduled_status_cannot_be_set_manually(client):
    create = await client.post("/api/v1/projects", json={"project_name": "Manual"})
    project_id = create.json()["id"]

    response = await client.patch(f"/api/v1/projects/{project_id}", json={"status": "Scheduled"})
    assert response.status_code == 400

    response = await client.get(f"/api/v1/projects/{project_id}")
    assert response.json()["status"] == "New"
