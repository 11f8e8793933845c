"""Public catalog endpoints."""
from httpx import ASGITransport, AsyncClient

from catalog.main import app
from catalog.services.storage import DatabaseStorage


async def _seed(storage):
    movie = await storage.create_content({"title": "Night Train", "type": "movie", "is_featured": True})
    series = await storage.create_content({"title": "Harbour Lights", "type": "series"})
    hidden = await storage.create_content({"title": "Night Shift", "type": "movie", "is_active": False})
    return movie, series, hidden


async def test_list_all_hides_inactive(client, storage):
    movie, series, _ = await _seed(storage)

    resp = await client.get("/api/content")
    assert resp.status_code == 200
    assert [c["id"] for c in resp.json()] == [series.id, movie.id]


async def test_response_uses_camel_case_fields(client, storage):
    await storage.create_content({"title": "X", "type": "movie", "genres": ["Drama"], "cast": ["A", "B"]})

    item = (await client.get("/api/content")).json()[0]
    assert item["viewCount"] == 0
    assert item["isActive"] is True
    assert item["isFeatured"] is False
    assert item["genres"] == ["Drama"]
    assert item["cast"] == ["A", "B"]
    assert "view_count" not in item


async def test_filter_by_type(client, storage):
    movie, series, _ = await _seed(storage)

    resp = await client.get("/api/content", params={"type": "series"})
    assert [c["id"] for c in resp.json()] == [series.id]

    # unknown types fall back to the full list
    resp = await client.get("/api/content", params={"type": "podcast"})
    assert len(resp.json()) == 2


async def test_featured_returns_single_item_or_null(client, storage):
    movie, _, _ = await _seed(storage)

    resp = await client.get("/api/content", params={"featured": "true"})
    assert resp.json()["id"] == movie.id

    await storage.update_content(movie.id, {"is_featured": False})
    resp = await client.get("/api/content", params={"featured": "true"})
    assert resp.status_code == 200
    assert resp.json() is None


async def test_query_flag_precedence(client, storage):
    movie, series, _ = await _seed(storage)

    # featured wins over everything else
    resp = await client.get("/api/content", params={"featured": "1", "popular": "1", "search": "harbour"})
    assert resp.json()["id"] == movie.id

    # search wins over type
    resp = await client.get("/api/content", params={"search": "harbour", "type": "movie"})
    assert [c["id"] for c in resp.json()] == [series.id]

    # empty flags are ignored
    resp = await client.get("/api/content", params={"featured": "", "type": "movie"})
    assert [c["id"] for c in resp.json()] == [movie.id]


async def test_popular_and_new(client, storage):
    movie, series, _ = await _seed(storage)
    await storage.increment_view_count(movie.id)

    popular = (await client.get("/api/content", params={"popular": "1"})).json()
    assert [c["id"] for c in popular] == [movie.id, series.id]

    newest = (await client.get("/api/content", params={"new": "1"})).json()
    assert [c["id"] for c in newest] == [series.id, movie.id]


async def test_search_skips_inactive(client, storage):
    movie, _, _ = await _seed(storage)

    resp = await client.get("/api/content", params={"search": "NIGHT"})
    assert [c["id"] for c in resp.json()] == [movie.id]


async def test_get_content_increments_view_count(client, storage, session_factory):
    movie, _, _ = await _seed(storage)

    first = await client.get(f"/api/content/{movie.id}")
    assert first.status_code == 200
    assert first.json()["viewCount"] == 0

    await client.get(f"/api/content/{movie.id}")

    async with session_factory() as session:
        fresh = await DatabaseStorage(session).get_content_by_id(movie.id)
    assert fresh.view_count == 2


async def test_get_content_missing_or_inactive_is_404(client, storage):
    _, _, hidden = await _seed(storage)

    resp = await client.get("/api/content/nope")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Content not found"}

    assert (await client.get(f"/api/content/{hidden.id}")).status_code == 404


async def test_episodes_endpoint_orders_episodes(client, storage):
    _, series, _ = await _seed(storage)
    for season, number in [(2, 1), (1, 2), (1, 1)]:
        await storage.create_episode(
            {
                "content_id": series.id,
                "title": f"S{season}E{number}",
                "episode_number": number,
                "season_number": season,
                "video_url": "https://cdn.example/ep.m3u8",
            }
        )

    resp = await client.get(f"/api/content/{series.id}/episodes")
    assert resp.status_code == 200
    assert [e["title"] for e in resp.json()] == ["S1E1", "S1E2", "S2E1"]
    assert resp.json()[0]["contentId"] == series.id


async def test_store_failure_returns_generic_500(session_factory, monkeypatch):
    from catalog.database import get_db

    async def boom(self):
        raise RuntimeError("connection reset")

    async def override_get_db():
        async with session_factory() as session:
            yield session

    monkeypatch.setattr(DatabaseStorage, "get_all_content", boom)
    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            resp = await c.get("/api/content")
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"message": "Internal server error"}
