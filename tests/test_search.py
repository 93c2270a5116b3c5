import pytest
from unittest.mock import AsyncMock, patch
from fastapi import status

from app.core.errors import StoreError
from app.core.result import Err, ErrorKind, Ok
from app.main import app
from app.dependencies.store import get_search_cache
from app.schemas.property import PropertyRecord, SearchOptions
from app.services.search import search_properties


@pytest.mark.asyncio
async def test_search_properties_returns_rows(fake_store, property_row):
    fake_store.queue([property_row(id=1, cost_per_night=100), property_row(id=2, cost_per_night=200)])

    result = await search_properties(fake_store, SearchOptions(city="Vancouver"), 5)

    assert isinstance(result, Ok)
    assert [p.id for p in result.value] == [1, 2]
    sql, params = fake_store.calls[0]
    assert "properties.city LIKE $1" in sql
    assert params == ("%Vancouver%", 5)


@pytest.mark.asyncio
async def test_search_properties_no_match_is_an_empty_ok(fake_store):
    fake_store.queue([])
    result = await search_properties(fake_store, SearchOptions(city="Atlantis"))
    assert result == Ok([])


@pytest.mark.asyncio
async def test_search_properties_store_failure_is_an_err(fake_store):
    fake_store.queue(StoreError(ErrorKind.STORE_UNAVAILABLE, "connection refused"))

    result = await search_properties(fake_store, SearchOptions())

    assert isinstance(result, Err)
    assert result.kind is ErrorKind.STORE_UNAVAILABLE
    assert result.message == "connection refused"


@pytest.mark.asyncio
async def test_search_properties_serves_from_cache(fake_store, property_row):
    cache = AsyncMock()
    cached = [PropertyRecord.model_validate(property_row())]
    cache.get.return_value = cached

    result = await search_properties(fake_store, SearchOptions(), 10, cache=cache)

    assert result == Ok(cached)
    assert fake_store.calls == []
    cache.set.assert_not_called()


@pytest.mark.asyncio
async def test_search_properties_fills_cache_on_miss(fake_store, property_row):
    cache = AsyncMock()
    cache.get.return_value = None
    fake_store.queue([property_row()])
    options = SearchOptions(owner_id=7)

    result = await search_properties(fake_store, options, 10, cache=cache)

    assert isinstance(result, Ok)
    cache.set.assert_awaited_once_with(options, 10, result.value)


@pytest.mark.asyncio
async def test_search_properties_failure_is_not_cached(fake_store):
    cache = AsyncMock()
    cache.get.return_value = None
    fake_store.queue(StoreError(ErrorKind.QUERY_FAILED, "syntax error"))

    result = await search_properties(fake_store, SearchOptions(), 10, cache=cache)

    assert isinstance(result, Err)
    cache.set.assert_not_called()


@pytest.mark.asyncio
async def test_search_endpoint_success(client, fake_store, property_row):
    fake_store.queue([property_row(average_rating=None)])

    response = await client.get(
        "/api/v1/properties?city=Vancouver&minimum_price_per_night=100&maximum_price_per_night=1000.5&limit=5"
    )

    assert response.status_code == status.HTTP_200_OK
    json_response = response.json()
    assert len(json_response) == 1
    assert json_response[0]["title"] == "Speed lamp"
    assert json_response[0]["average_rating"] is None
    _, params = fake_store.calls[0]
    assert params == ("%Vancouver%", 10000, 100050, 5)


@pytest.mark.asyncio
async def test_search_endpoint_blank_city_is_ignored(client, fake_store):
    response = await client.get("/api/v1/properties?city=&minimum_rating=4")

    assert response.status_code == status.HTTP_200_OK
    sql, params = fake_store.calls[0]
    assert "WHERE" not in sql
    assert params == (4, 10)


@pytest.mark.asyncio
async def test_search_endpoint_invalid_price_range(client, fake_store):
    response = await client.get("/api/v1/properties?minimum_price_per_night=500&maximum_price_per_night=100")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "cannot be greater than" in response.json()["detail"]
    assert fake_store.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["limit=0", "limit=500", "minimum_rating=6", "owner_id=0"])
async def test_search_endpoint_rejects_bad_query(client, fake_store, query):
    response = await client.get(f"/api/v1/properties?{query}")
    assert response.status_code == 422
    assert fake_store.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("kind,expected", [
    (ErrorKind.STORE_UNAVAILABLE, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ErrorKind.QUERY_FAILED, status.HTTP_500_INTERNAL_SERVER_ERROR),
])
async def test_search_endpoint_store_failure(client, fake_store, kind, expected):
    fake_store.queue(StoreError(kind, "boom"))
    response = await client.get("/api/v1/properties")
    assert response.status_code == expected


@pytest.mark.asyncio
async def test_search_endpoint_passes_cache_to_service(client):
    cache = object()
    app.dependency_overrides[get_search_cache] = lambda: cache
    with patch("app.routers.properties.search_properties", new_callable=AsyncMock) as mock_search:
        mock_search.return_value = Ok([])
        response = await client.get("/api/v1/properties?owner_id=3&limit=2")

    assert response.status_code == status.HTTP_200_OK
    args, kwargs = mock_search.call_args
    assert args[1] == SearchOptions(owner_id=3)
    assert args[2] == 2
    assert kwargs["cache"] is cache
