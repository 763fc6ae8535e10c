import pytest
import xmltodict
from tortoise.exceptions import OperationalError

from bookstore.models.book import Book


pytestmark = pytest.mark.asyncio


async def _owner(create_user, auth_header_factory):
    user, password = await create_user()
    return user, await auth_header_factory(user.username, password)


async def _add_book(client, user_id: int, headers: dict, **fields):
    resp = await client.post(f"/users/{user_id}/books", json=fields, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_create_book_returns_book_with_owner(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)

    book = await _add_book(
        client, user.id, headers,
        title="Foo", description="About foo", price=100, image_url="https://img.example/foo.png",
    )
    assert book["id"] > 0
    assert book["user_id"] == user.id
    assert book["user"]["username"] == user.username
    assert book["user"]["pseudonym"] == user.pseudonym
    assert book["price"] == 100


async def test_create_book_validation_codes(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    await _add_book(client, user.id, headers, title="Foo", price=100)

    cases = [
        ({"price": 10}, "book_mandatory_fields:title"),
        ({"title": "Foo", "price": 10}, "book_already_exists"),
        ({"title": "Bar", "image_url": "bar.png"}, "invalid_book_fields:image_url"),
        ({"title": "Bar", "price": -1}, "invalid_book_fields:price"),
    ]
    for payload, code in cases:
        resp = await client.post(f"/users/{user.id}/books", json=payload, headers=headers)
        assert resp.status_code == 400, payload
        assert resp.json() == {"detail": code}


async def test_create_book_for_another_user_is_forbidden(client, create_user, auth_header_factory):
    _, headers = await _owner(create_user, auth_header_factory)
    other, _ = await create_user()

    resp = await client.post(f"/users/{other.id}/books", json={"title": "Foo"}, headers=headers)
    assert resp.status_code == 403


async def test_admin_manages_any_users_books(client, create_admin, create_user, auth_header_factory):
    admin, password = await create_admin()
    headers = await auth_header_factory(admin.username, password)
    user, _ = await create_user()

    book = await _add_book(client, user.id, headers, title="Foo")
    assert book["user_id"] == user.id

    resp = await client.put(f"/users/{user.id}/books/{book['id']}", json={"price": 50}, headers=headers)
    assert resp.status_code == 200
    resp = await client.delete(f"/users/{user.id}/books/{book['id']}", headers=headers)
    assert resp.status_code == 200


async def test_create_book_for_unknown_user(client, create_admin, auth_header_factory):
    admin, password = await create_admin()
    headers = await auth_header_factory(admin.username, password)

    resp = await client.post("/users/9999/books", json={"title": "Foo"}, headers=headers)
    assert resp.status_code == 404


async def test_list_user_books(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    other, other_headers = await _owner(create_user, auth_header_factory)
    await _add_book(client, user.id, headers, title="Alpha")
    await _add_book(client, user.id, headers, title="Beta")
    await _add_book(client, other.id, other_headers, title="Gamma")

    resp = await client.get(f"/users/{user.id}/books", headers=other_headers)
    assert resp.status_code == 200
    assert [b["title"] for b in resp.json()] == ["Beta", "Alpha"]

    assert (await client.get(f"/users/{user.id}/books")).status_code == 401
    assert (await client.get("/users/9999/books", headers=headers)).status_code == 404


async def test_update_book_is_partial(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, user.id, headers, title="Foo", description="keep me", price=100)

    resp = await client.put(f"/users/{user.id}/books/{book['id']}", json={"price": 250}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["price"] == 250
    assert body["description"] == "keep me"
    assert body["title"] == "Foo"
    assert body["user"]["username"] == user.username


async def test_update_book_validation(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    foo = await _add_book(client, user.id, headers, title="Foo")
    await _add_book(client, user.id, headers, title="Bar")
    url = f"/users/{user.id}/books/{foo['id']}"

    # Same title as itself is fine
    assert (await client.put(url, json={"title": "Foo"}, headers=headers)).status_code == 200

    resp = await client.put(url, json={"title": "Bar"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "book_already_exists"

    resp = await client.put(url, json={"price": -5}, headers=headers)
    assert resp.json()["detail"] == "invalid_book_fields:price"


async def test_other_users_book_is_forbidden(client, create_user, auth_header_factory):
    owner, owner_headers = await _owner(create_user, auth_header_factory)
    _, intruder_headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, owner.id, owner_headers, title="Foo")
    url = f"/users/{owner.id}/books/{book['id']}"

    assert (await client.put(url, json={"price": 1}, headers=intruder_headers)).status_code == 403
    assert (await client.delete(url, headers=intruder_headers)).status_code == 403


async def test_book_under_wrong_owner_is_not_found(client, create_user, auth_header_factory):
    owner, owner_headers = await _owner(create_user, auth_header_factory)
    other, other_headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, owner.id, owner_headers, title="Foo")

    resp = await client.put(f"/users/{other.id}/books/{book['id']}", json={"price": 1}, headers=other_headers)
    assert resp.status_code == 404


async def test_delete_book_returns_it(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, user.id, headers, title="Foo", price=100)

    resp = await client.delete(f"/users/{user.id}/books/{book['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Foo"

    assert (await client.get(f"/books/{book['id']}")).status_code == 404
    resp = await client.delete(f"/users/{user.id}/books/{book['id']}", headers=headers)
    assert resp.status_code == 404


async def test_public_listing_and_lookup(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, user.id, headers, title="Foo", price=100)
    await _add_book(client, user.id, headers, title="Bar", price=300)

    resp = await client.get("/books")
    assert resp.status_code == 200
    assert [b["title"] for b in resp.json()] == ["Foo", "Bar"]

    resp = await client.get(f"/books/{book['id']}")
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id

    assert (await client.get("/books/9999")).status_code == 404


async def test_search_books(client, create_user, auth_header_factory):
    alice, alice_headers = await _owner(create_user, auth_header_factory)
    bob, bob_headers = await _owner(create_user, auth_header_factory)
    await _add_book(client, alice.id, alice_headers, title="Learning Python", description="snakes", price=100)
    await _add_book(client, alice.id, alice_headers, title="Go in Action", description="gophers", price=250)
    await _add_book(client, bob.id, bob_headers, title="Python Tricks", description="snakes again", price=400)

    async def titles(**params):
        resp = await client.get("/books", params=params)
        assert resp.status_code == 200, resp.text
        return [b["title"] for b in resp.json()]

    assert await titles(**{"author-id": alice.id}) == ["Learning Python", "Go in Action"]
    assert await titles(title="PYTHON") == ["Python Tricks", "Learning Python"]
    assert await titles(description="snakes", order="price", direction="asc") == [
        "Learning Python", "Python Tricks",
    ]
    assert await titles(**{"min-price": 200, "max-price": 300}) == ["Go in Action"]
    assert await titles(order="price", direction="asc", limit=2, offset=1) == ["Go in Action", "Python Tricks"]


@pytest.mark.parametrize(
    "params,code",
    [
        ({"min-price": 200, "max-price": 100}, "invalid_search_fields:min-price,max-price"),
        ({"author-id": 0}, "invalid_search_fields:author-id"),
        ({"max-price": 0}, "invalid_search_fields:max-price"),
        ({"title": ""}, "invalid_search_fields:title"),
        ({"order": "author"}, "invalid_search_fields:order"),
        ({"direction": "sideways"}, "invalid_search_fields:direction"),
        ({"limit": 0}, "invalid_search_fields:limit"),
    ],
)
async def test_search_rejections(client, params, code):
    resp = await client.get("/books", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"detail": code}


async def test_books_in_xml(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    xml_headers = {**headers, "Content-Type": "text/xml", "Accept": "application/xml"}

    resp = await client.post(
        f"/users/{user.id}/books",
        content="<book><title>Foo</title><price>100</price></book>",
        headers=xml_headers,
    )
    assert resp.status_code == 201
    created = xmltodict.parse(resp.content)["book"]
    assert created["title"] == "Foo"
    assert created["price"] == "100"
    assert created["user"]["username"] == user.username

    await _add_book(client, user.id, headers, title="Bar")
    resp = await client.get("/books", headers={"Accept": "text/xml"})
    assert resp.headers["content-type"].startswith("text/xml")
    listed = xmltodict.parse(resp.content)["books"]["book"]
    assert [b["title"] for b in listed] == ["Foo", "Bar"]


async def test_errors_follow_accept_header(client):
    resp = await client.get("/books/9999", headers={"Accept": "application/xml"})
    assert resp.status_code == 404
    assert xmltodict.parse(resp.content)["error"]["detail"] == "Resource Not Found"


# ===== Out-of-range and unparseable input =====
TOO_BIG = 99999999999999999999


@pytest.mark.parametrize(
    "params,code",
    [
        ({"min-price": TOO_BIG}, "invalid_search_fields:min-price"),
        ({"max-price": TOO_BIG}, "invalid_search_fields:max-price"),
        ({"author-id": TOO_BIG}, "invalid_search_fields:author-id"),
        ({"limit": TOO_BIG}, "invalid_search_fields:limit"),
        ({"offset": TOO_BIG}, "invalid_search_fields:offset"),
    ],
)
async def test_search_with_oversized_numbers(client, params, code):
    resp = await client.get("/books", params=params)
    assert resp.status_code == 400
    assert resp.json() == {"detail": code}


async def test_oversized_ids_in_paths(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)
    book = await _add_book(client, user.id, headers, title="Foo")

    responses = [
        await client.get(f"/books/{TOO_BIG}"),
        await client.get(f"/users/{TOO_BIG}/books", headers=headers),
        await client.post(f"/users/{TOO_BIG}/books", json={"title": "Bar"}, headers=headers),
        await client.put(f"/users/{user.id}/books/{TOO_BIG}", json={"price": 1}, headers=headers),
        await client.delete(f"/users/{TOO_BIG}/books/{book['id']}", headers=headers),
    ]
    for resp in responses:
        assert resp.status_code == 400, resp.request.url
        assert resp.json() == {"detail": "Malformed request parameter"}


async def test_oversized_price(client, create_user, auth_header_factory):
    user, headers = await _owner(create_user, auth_header_factory)

    resp = await client.post(f"/users/{user.id}/books", json={"title": "Foo", "price": 10**20}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "invalid_book_fields:price"}

    book = await _add_book(client, user.id, headers, title="Foo", price=100)
    resp = await client.put(f"/users/{user.id}/books/{book['id']}", json={"price": 2**31}, headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "invalid_book_fields:price"}


async def test_unparseable_search_parameter_follows_accept(client):
    resp = await client.get("/books", params={"min-price": "abc"}, headers={"Accept": "application/xml"})
    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("application/xml")
    assert xmltodict.parse(resp.content)["error"]["detail"] == "invalid_search_fields:min-price"


async def test_unparseable_path_id(client):
    resp = await client.get("/books/abc", headers={"Accept": "text/xml"})
    assert resp.status_code == 400
    assert xmltodict.parse(resp.content)["error"]["detail"] == "Malformed request parameter"

    resp = await client.get("/books/abc")
    assert resp.json() == {"detail": "Malformed request parameter"}


# ===== Storage failures =====
async def test_storage_failure_is_opaque(client, monkeypatch):
    def broken_filter(*args, **kwargs):
        raise OperationalError("disk I/O error at /var/lib/bookstore.sqlite3")

    monkeypatch.setattr(Book, "filter", broken_filter)

    resp = await client.get("/books")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Server Error"}
    assert "disk" not in resp.text

    resp = await client.get("/books/1", headers={"Accept": "application/xml"})
    assert resp.status_code == 500
    assert xmltodict.parse(resp.content)["error"]["detail"] == "Server Error"
