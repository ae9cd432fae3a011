# tests/test_books_api.py
from conftest import SAMPLE_BOOKS


def test_create_returns_201_with_location_and_id(client):
    r = client.post("/api/books", json=SAMPLE_BOOKS[0])
    assert r.status_code == 201
    body = r.json()
    assert isinstance(body["id"], int)
    assert r.headers["location"] == f"/api/books/{body['id']}"
    assert body["pageCount"] == 432
    assert body["price"] == 9.99


def test_create_then_get_round_trip(client):
    created = client.post("/api/books", json=SAMPLE_BOOKS[1]).json()
    r = client.get(f"/api/books/{created['id']}")
    assert r.status_code == 200
    got = r.json()
    assert got.pop("id") == created["id"]
    assert got == SAMPLE_BOOKS[1]


def test_classification_defaults_to_unclassified(client):
    draft = dict(SAMPLE_BOOKS[0])
    del draft["classification"]
    body = client.post("/api/books", json=draft).json()
    assert body["classification"] == "Unclassified"


def test_create_missing_field_is_400(client):
    draft = dict(SAMPLE_BOOKS[0])
    del draft["title"]
    r = client.post("/api/books", json=draft)
    assert r.status_code == 400


def test_get_missing_is_404(client):
    r = client.get("/api/books/999")
    assert r.status_code == 404
    assert "999" in r.json()["detail"]


def test_update_replaces_fields(client, seeded):
    book = dict(seeded[0])
    book.update(title="Persuasion", price=12.25, classification="Novel")
    r = client.put(f"/api/books/{book['id']}", json=book)
    assert r.status_code == 204
    assert r.content == b""
    assert client.get(f"/api/books/{book['id']}").json() == book


def test_update_id_mismatch_is_400(client, seeded):
    book = dict(seeded[0])
    r = client.put(f"/api/books/{book['id'] + 100}", json=book)
    assert r.status_code == 400


def test_update_missing_is_404(client):
    book = dict(SAMPLE_BOOKS[0], id=42)
    r = client.put("/api/books/42", json=book)
    assert r.status_code == 404


def test_delete_then_get_is_404(client, seeded):
    book_id = seeded[2]["id"]
    assert client.delete(f"/api/books/{book_id}").status_code == 204
    assert client.get(f"/api/books/{book_id}").status_code == 404
    assert client.delete(f"/api/books/{book_id}").status_code == 404


def test_list_defaults(client, seeded):
    r = client.get("/api/books")
    assert r.status_code == 200
    body = r.json()
    assert body["totalBooks"] == len(SAMPLE_BOOKS)
    titles = [b["title"] for b in body["books"]]
    # default page size 5, sorted by title ascending
    assert titles == [
        "A Brief History of Time",
        "Cosmos",
        "Emma",
        "Great Expectations",
        "Moby Dick",
    ]


def test_list_query_parameters(client, seeded):
    r = client.get("/api/books", params={
        "page": 1, "pageSize": 10, "sortField": "Price", "sortOrder": "desc", "category": "Romance",
    })
    body = r.json()
    assert body["totalBooks"] == 2
    assert [b["title"] for b in body["books"]] == ["Emma", "Pride and Prejudice"]


def test_list_all_category_means_no_filter(client, seeded):
    body = client.get("/api/books", params={"category": "All", "pageSize": 20}).json()
    assert body["totalBooks"] == len(SAMPLE_BOOKS)


def test_list_page_beyond_end(client, seeded):
    body = client.get("/api/books", params={"page": 50}).json()
    assert body == {"totalBooks": len(SAMPLE_BOOKS), "books": []}


def test_list_rejects_bad_paging(client):
    assert client.get("/api/books", params={"page": 0}).status_code == 400
    assert client.get("/api/books", params={"pageSize": 0}).status_code == 400
    assert client.get("/api/books", params={"pageSize": 1000}).status_code == 400
    assert client.get("/api/books", params={"page": "two"}).status_code == 400


def test_categories_sorted_distinct(client, seeded):
    r = client.get("/api/books/categories")
    assert r.status_code == 200
    assert r.json() == ["Classic", "Romance", "Science"]


def test_categories_empty_store(client):
    assert client.get("/api/books/categories").json() == []


def test_page_size_cap_is_reported(client):
    r = client.get("/api/books", params={"pageSize": 101})
    assert r.status_code == 400
    assert "100" in r.json()["detail"]


def test_store_failure_is_500_with_detail(client, broken_db):
    r = client.get("/api/books")
    assert r.status_code == 500
    assert "detail" in r.json()

    r = client.get("/api/books/categories")
    assert r.status_code == 500
    assert "detail" in r.json()
