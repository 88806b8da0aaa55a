from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

import mes_admin.repositories.responsible as responsible_repo
from mes_admin.core.security import create_access_token
from mes_admin.db.models.responsible_category import ResponsibleCategory as CategoryModel


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def shift_category(client, t1_headers: dict) -> dict:
    response = client.post(
        "/api/v1/responsible-categories",
        json={"name": "Shift leads", "description": "Per-shift owners"},
        headers=t1_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture(scope="function")
def ops_responsible(client, t1_headers: dict) -> dict:
    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-01", "name": "Operations"},
        headers=t1_headers,
    )
    assert response.status_code == 201
    return response.json()


# ============================================================================
# TENANT CONTEXT TESTS
# ============================================================================


def test_tenant_taken_from_token(client, t1_headers: dict, ops_responsible: dict):
    assert ops_responsible["tenant_id"] == "t1"


def test_tenant_taken_from_header(client, admin_token: str, ops_responsible: dict):
    """Callers without a tenant in their token name it through X-Tenant-ID."""
    response = client.get(
        "/api/v1/responsibles",
        headers={"Authorization": f"Bearer {admin_token}", "X-Tenant-ID": "t1"},
    )
    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_token_tenant_wins_over_header(client, t2_token: str, ops_responsible: dict):
    response = client.get(
        "/api/v1/responsibles",
        headers={"Authorization": f"Bearer {t2_token}", "X-Tenant-ID": "t1"},
    )
    assert response.status_code == 200
    assert response.json()["total"] == 0


def test_missing_tenant_context(client, admin_headers: dict):
    response = client.get("/api/v1/responsibles", headers=admin_headers)
    assert response.status_code == 400


def test_missing_token(client):
    response = client.get("/api/v1/responsibles", headers={"X-Tenant-ID": "t1"})
    assert response.status_code == 401


def test_invalid_token(client):
    response = client.get(
        "/api/v1/responsibles",
        headers={"Authorization": "Bearer not-a-jwt", "X-Tenant-ID": "t1"},
    )
    assert response.status_code == 401


def test_expired_token(client):
    token = create_access_token(
        data={"sub": "operator-1", "tenant_id": "t1"}, expires_delta=timedelta(minutes=-1)
    )
    response = client.get("/api/v1/responsibles", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


# ============================================================================
# CREATE RESPONSIBLE TESTS
# ============================================================================


def test_create_responsible_success(client, t1_headers: dict):
    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "QA_02", "name": "Quality"},
        headers=t1_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["code_responsible"] == "QA_02"
    assert data["name"] == "Quality"
    assert data["category_responsible_id"] is None
    assert data["deleted_at"] is None


def test_same_code_in_two_tenants(client, t1_headers: dict, t2_headers: dict):
    """Uniqueness is per tenant."""
    payload = {"code_responsible": "OPS-01", "name": "Operations"}
    assert client.post("/api/v1/responsibles", json=payload, headers=t1_headers).status_code == 201
    assert client.post("/api/v1/responsibles", json=payload, headers=t2_headers).status_code == 201


def test_create_responsible_duplicate_code(client, t1_headers: dict, ops_responsible: dict):
    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-01", "name": "Operations 2"},
        headers=t1_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"
    assert response.json()["field"] == "code_responsible"


def test_create_responsible_duplicate_name(client, t1_headers: dict, ops_responsible: dict):
    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-02", "name": "Operations"},
        headers=t1_headers,
    )
    assert response.status_code == 409
    assert response.json()["field"] == "name"


@pytest.mark.parametrize("code", ["ops-01", "OPS 01", "OPS.01"])
def test_create_responsible_invalid_code(client, t1_headers: dict, code: str):
    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": code, "name": "Operations"},
        headers=t1_headers,
    )
    assert response.status_code == 422


def test_create_responsible_with_category(client, t1_headers: dict, shift_category: dict):
    response = client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    )
    assert response.status_code == 201
    assert response.json()["category_responsible_id"] == shift_category["id"]


def test_create_responsible_with_other_tenant_category(
    client, t2_headers: dict, shift_category: dict
):
    response = client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t2_headers,
    )
    assert response.status_code == 404


# ============================================================================
# READ RESPONSIBLE TESTS
# ============================================================================


def test_get_responsible_by_id_embeds_category(client, t1_headers: dict, shift_category: dict):
    created = client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    ).json()

    response = client.get(f"/api/v1/responsibles/{created['id']}", headers=t1_headers)
    assert response.status_code == 200
    assert response.json()["category"]["name"] == "Shift leads"


def test_deleted_category_not_embedded(
    client, db: Session, t1_headers: dict, shift_category: dict
):
    created = client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    ).json()
    category = db.query(CategoryModel).filter(CategoryModel.id == shift_category["id"]).one()
    category.deleted_at = datetime.now(timezone.utc)
    db.commit()

    response = client.get(f"/api/v1/responsibles/{created['id']}", headers=t1_headers)
    assert response.status_code == 200
    assert response.json()["category"] is None
    assert response.json()["category_responsible_id"] == shift_category["id"]

    data = client.get("/api/v1/responsibles?include_category=true", headers=t1_headers).json()
    assert data["items"][0]["category"] is None


def test_get_responsible_of_other_tenant(client, t2_headers: dict, ops_responsible: dict):
    """Another tenant's responsible is reported as missing."""
    response = client.get(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t2_headers)
    assert response.status_code == 404


def test_get_responsible_by_code(client, t1_headers: dict, t2_headers: dict, ops_responsible: dict):
    response = client.get("/api/v1/responsibles/code/OPS-01", headers=t1_headers)
    assert response.status_code == 200
    assert response.json()["id"] == ops_responsible["id"]

    response = client.get("/api/v1/responsibles/code/OPS-01", headers=t2_headers)
    assert response.status_code == 404


def test_search_responsibles_by_name(client, t1_headers: dict, ops_responsible: dict):
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "MAINT", "name": "Maintenance"},
        headers=t1_headers,
    )

    response = client.get("/api/v1/responsibles/name/ation", headers=t1_headers)
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["Operations"]


def test_responsibles_by_category(client, t1_headers: dict, shift_category: dict, ops_responsible: dict):
    client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    )

    response = client.get(
        f"/api/v1/responsibles/category/{shift_category['id']}", headers=t1_headers
    )
    assert [r["code_responsible"] for r in response.json()] == ["SL-1"]

    response = client.get("/api/v1/responsibles/without-category", headers=t1_headers)
    assert [r["code_responsible"] for r in response.json()] == ["OPS-01"]


# ============================================================================
# LIST RESPONSIBLE TESTS
# ============================================================================


def test_list_responsibles_scoped_to_tenant(
    client, t1_headers: dict, t2_headers: dict, ops_responsible: dict
):
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-01", "name": "Operations"},
        headers=t2_headers,
    )

    data = client.get("/api/v1/responsibles", headers=t1_headers).json()
    assert data["total"] == 1
    assert data["items"][0]["tenant_id"] == "t1"


def test_list_responsibles_search_by_code(client, t1_headers: dict, ops_responsible: dict):
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "MAINT", "name": "Maintenance"},
        headers=t1_headers,
    )

    data = client.get("/api/v1/responsibles?search=ops", headers=t1_headers).json()
    assert [r["code_responsible"] for r in data["items"]] == ["OPS-01"]


def test_list_responsibles_include_category(client, t1_headers: dict, shift_category: dict):
    client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    )

    data = client.get("/api/v1/responsibles", headers=t1_headers).json()
    assert data["items"][0]["category"] is None

    data = client.get("/api/v1/responsibles?include_category=true", headers=t1_headers).json()
    assert data["items"][0]["category"]["id"] == shift_category["id"]


def test_list_responsibles_excludes_deleted(client, t1_headers: dict, ops_responsible: dict):
    client.delete(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t1_headers)

    assert client.get("/api/v1/responsibles", headers=t1_headers).json()["total"] == 0
    data = client.get("/api/v1/responsibles?include_deleted=true", headers=t1_headers).json()
    assert data["total"] == 1


# ============================================================================
# UPDATE RESPONSIBLE TESTS
# ============================================================================


def test_update_responsible_partial(client, t1_headers: dict, ops_responsible: dict):
    response = client.put(
        f"/api/v1/responsibles/{ops_responsible['id']}",
        json={"name": "Operations Team"},
        headers=t1_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Operations Team"
    assert data["code_responsible"] == "OPS-01"
    assert data["updated_at"] is not None


def test_update_responsible_assign_and_clear_category(
    client, t1_headers: dict, shift_category: dict, ops_responsible: dict
):
    url = f"/api/v1/responsibles/{ops_responsible['id']}"
    response = client.put(
        url, json={"category_responsible_id": shift_category["id"]}, headers=t1_headers
    )
    assert response.json()["category_responsible_id"] == shift_category["id"]

    response = client.put(url, json={"category_responsible_id": None}, headers=t1_headers)
    assert response.status_code == 200
    assert response.json()["category_responsible_id"] is None


def test_update_responsible_duplicate_code(client, t1_headers: dict, ops_responsible: dict):
    other = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "MAINT", "name": "Maintenance"},
        headers=t1_headers,
    ).json()

    response = client.put(
        f"/api/v1/responsibles/{other['id']}",
        json={"code_responsible": "OPS-01"},
        headers=t1_headers,
    )
    assert response.status_code == 409


def test_update_responsible_of_other_tenant(client, t2_headers: dict, ops_responsible: dict):
    response = client.put(
        f"/api/v1/responsibles/{ops_responsible['id']}",
        json={"name": "Hijacked"},
        headers=t2_headers,
    )
    assert response.status_code == 404


# ============================================================================
# DELETE / RESTORE RESPONSIBLE TESTS
# ============================================================================


def test_delete_and_restore_responsible(client, t1_headers: dict, ops_responsible: dict):
    url = f"/api/v1/responsibles/{ops_responsible['id']}"
    assert client.delete(url, headers=t1_headers).status_code == 204

    response = client.delete(url, headers=t1_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_DELETED"

    response = client.patch(f"{url}/restore", headers=t1_headers)
    assert response.status_code == 200
    assert response.json()["deleted_at"] is None

    response = client.patch(f"{url}/restore", headers=t1_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "NOT_DELETED"


def test_restore_responsible_after_code_reused(client, t1_headers: dict, ops_responsible: dict):
    client.delete(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t1_headers)
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-01", "name": "Operations"},
        headers=t1_headers,
    )

    response = client.patch(
        f"/api/v1/responsibles/{ops_responsible['id']}/restore", headers=t1_headers
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"
    assert response.json()["field"] == "code_responsible"


def test_restore_responsible_after_name_reused(client, t1_headers: dict, ops_responsible: dict):
    client.delete(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t1_headers)
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-02", "name": "Operations"},
        headers=t1_headers,
    )

    response = client.patch(
        f"/api/v1/responsibles/{ops_responsible['id']}/restore", headers=t1_headers
    )
    assert response.status_code == 409
    assert response.json()["field"] == "name"

    response = client.get(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t1_headers)
    assert response.json()["deleted_at"] is not None


def test_delete_responsible_of_other_tenant(client, t2_headers: dict, ops_responsible: dict):
    response = client.delete(f"/api/v1/responsibles/{ops_responsible['id']}", headers=t2_headers)
    assert response.status_code == 404


# ============================================================================
# CONCURRENT WRITE TESTS
# ============================================================================


def test_create_responsible_rejected_by_unique_index(
    client, t1_headers: dict, ops_responsible: dict, monkeypatch
):
    """A duplicate that slips past the lookups is still refused by the store."""
    monkeypatch.setattr(responsible_repo, "get_responsible_by_code", lambda *args, **kwargs: None)
    monkeypatch.setattr(responsible_repo, "get_responsible_by_name", lambda *args, **kwargs: None)

    response = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OPS-01", "name": "Operations"},
        headers=t1_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"
    assert client.get("/api/v1/responsibles", headers=t1_headers).json()["total"] == 1


def test_update_responsible_rejected_by_unique_index(
    client, t1_headers: dict, ops_responsible: dict, monkeypatch
):
    other = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "MAINT", "name": "Maintenance"},
        headers=t1_headers,
    ).json()
    monkeypatch.setattr(responsible_repo, "get_responsible_by_code", lambda *args, **kwargs: None)

    response = client.put(
        f"/api/v1/responsibles/{other['id']}",
        json={"code_responsible": "OPS-01"},
        headers=t1_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"

    response = client.get(f"/api/v1/responsibles/{other['id']}", headers=t1_headers)
    assert response.json()["code_responsible"] == "MAINT"


# ============================================================================
# STATISTICS TESTS
# ============================================================================


def test_responsible_statistics(
    client, t1_headers: dict, t2_headers: dict, shift_category: dict, ops_responsible: dict
):
    client.post(
        "/api/v1/responsibles",
        json={
            "code_responsible": "SL-1",
            "name": "Shift lead one",
            "category_responsible_id": shift_category["id"],
        },
        headers=t1_headers,
    )
    gone = client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "TMP", "name": "Temporary"},
        headers=t1_headers,
    ).json()
    client.delete(f"/api/v1/responsibles/{gone['id']}", headers=t1_headers)
    client.post(
        "/api/v1/responsibles",
        json={"code_responsible": "OTHER", "name": "Other tenant"},
        headers=t2_headers,
    )

    response = client.get("/api/v1/responsibles/statistics", headers=t1_headers)
    assert response.status_code == 200
    assert response.json() == {
        "total_responsibles": 3,
        "active_responsibles": 2,
        "deleted_responsibles": 1,
        "responsibles_with_category": 1,
        "responsibles_without_category": 1,
        "responsibles_by_category": [{"category_name": "Shift leads", "count": 1}],
    }


# ============================================================================
# RESPONSIBLE CATEGORY TESTS
# ============================================================================


def test_create_category_duplicate_name(client, t1_headers: dict, shift_category: dict):
    response = client.post(
        "/api/v1/responsible-categories", json={"name": "Shift leads"}, headers=t1_headers
    )
    assert response.status_code == 409
    assert response.json()["field"] == "name"


def test_categories_scoped_to_tenant(client, t1_headers: dict, t2_headers: dict, shift_category: dict):
    response = client.post(
        "/api/v1/responsible-categories", json={"name": "Shift leads"}, headers=t2_headers
    )
    assert response.status_code == 201

    names = [c["name"] for c in client.get("/api/v1/responsible-categories", headers=t1_headers).json()]
    assert names == ["Shift leads"]

    response = client.get(
        f"/api/v1/responsible-categories/{shift_category['id']}", headers=t2_headers
    )
    assert response.status_code == 404


def test_list_categories_ordered_by_name(client, t1_headers: dict, shift_category: dict):
    client.post("/api/v1/responsible-categories", json={"name": "Auditors"}, headers=t1_headers)

    response = client.get("/api/v1/responsible-categories", headers=t1_headers)
    assert [c["name"] for c in response.json()] == ["Auditors", "Shift leads"]
