from fastapi import status


def create_category(client, headers, name="Tech", description=None):
    return client.post("/api/categories", headers=headers, json={"name": name, "description": description})


def test_create_category(client, auth_header):
    response = create_category(client, auth_header, description="All things tech")
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["name"] == "Tech"
    assert body["description"] == "All things tech"
    assert body["created_at"] is not None
    assert response.headers["location"] == f"/api/categories/{body['id']}"


def test_create_category_requires_authentication(client):
    response = create_category(client, {})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_category_names_are_unique_ignoring_case(client, auth_header):
    assert create_category(client, auth_header, name="tech").status_code == 201

    response = create_category(client, auth_header, name="Tech")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Category with this name already exists"


def test_create_category_validation(client, auth_header):
    assert create_category(client, auth_header, name="T").status_code == 400
    assert create_category(client, auth_header, name="x" * 51).status_code == 400
    assert create_category(client, auth_header, name="  ").status_code == 400
    assert create_category(client, auth_header, description="d" * 201).status_code == 400


def test_list_categories_ordered_by_name(client, auth_header):
    for name in ("Travel", "Art", "Music"):
        create_category(client, auth_header, name=name)

    response = client.get("/api/categories")
    assert response.status_code == status.HTTP_200_OK
    assert [c["name"] for c in response.json()] == ["Art", "Music", "Travel"]


def test_get_category(client, auth_header):
    category_id = create_category(client, auth_header).json()["id"]

    response = client.get(f"/api/categories/{category_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Tech"


def test_get_missing_category(client):
    assert client.get("/api/categories/404").status_code == status.HTTP_404_NOT_FOUND


def test_update_category(client, auth_header):
    category_id = create_category(client, auth_header).json()["id"]

    response = client.put(f"/api/categories/{category_id}", headers=auth_header, json={
        "id": category_id, "name": "Technology", "description": "Renamed"
    })
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/categories/{category_id}").json()["name"] == "Technology"


def test_update_category_keeps_own_name_with_new_case(client, auth_header):
    category_id = create_category(client, auth_header, name="tech").json()["id"]

    response = client.put(f"/api/categories/{category_id}", headers=auth_header, json={
        "id": category_id, "name": "Tech"
    })
    assert response.status_code == status.HTTP_204_NO_CONTENT


def test_update_category_name_conflict(client, auth_header):
    create_category(client, auth_header, name="Art")
    category_id = create_category(client, auth_header, name="Music").json()["id"]

    response = client.put(f"/api/categories/{category_id}", headers=auth_header, json={
        "id": category_id, "name": "ART"
    })
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_category_id_mismatch(client, auth_header):
    category_id = create_category(client, auth_header).json()["id"]

    response = client.put(f"/api/categories/{category_id}", headers=auth_header, json={
        "id": category_id + 1, "name": "Other"
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_missing_category(client, auth_header):
    response = client.put("/api/categories/77", headers=auth_header, json={"id": 77, "name": "Other"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_category_keeps_posts(client, auth_header):
    category_id = create_category(client, auth_header).json()["id"]
    post = client.post("/api/posts", headers=auth_header, json={
        "title": "Categorized", "content": "Some content here", "category_id": category_id
    }).json()

    response = client.delete(f"/api/categories/{category_id}", headers=auth_header)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/categories/{category_id}").status_code == 404

    remaining = client.get(f"/api/posts/{post['id']}").json()
    assert remaining["category_id"] is None
    assert remaining["category"] is None


def test_delete_missing_category(client, auth_header):
    assert client.delete("/api/categories/5", headers=auth_header).status_code == 404


def test_delete_category_requires_authentication(client, auth_header):
    category_id = create_category(client, auth_header).json()["id"]
    assert client.delete(f"/api/categories/{category_id}").status_code == 401
