"""End-to-end tests: FastAPI app in-process, upstream APIs stubbed with respx."""

import httpx
import pytest
from httpx import Response

from conftest import TEST_API_KEY

WEATHER = {"host": "api.openweathermap.org", "path": "/data/2.5/weather"}
DOG = {"host": "dog.ceo", "path": "/api/breeds/image/random"}
SAMPLE = {"host": "jsonplaceholder.typicode.com", "path": "/users"}


class TestWeather:

    async def test_paris_end_to_end(self, client, upstream):
        route = upstream.get(**WEATHER).mock(return_value=Response(200, json={
            "cod": 200,
            "name": "Paris",
            "main": {"temp": 15.2},
            "weather": [{"description": "clear sky"}],
        }))

        resp = await client.get("/api/weather", params={"city": "Paris"})

        assert resp.status_code == 200
        assert resp.json() == {"city": "Paris", "temperature": 15.2, "description": "clear sky"}
        sent = route.calls.last.request.url.params
        assert sent["q"] == "Paris"
        assert sent["units"] == "metric"
        assert sent["appid"] == TEST_API_KEY

    async def test_missing_city_makes_no_upstream_call(self, client, upstream):
        route = upstream.get(**WEATHER).mock(return_value=Response(200, json={}))

        resp = await client.get("/api/weather")

        assert resp.status_code == 400
        assert resp.json() == {"error": "City is required"}
        assert route.call_count == 0

    async def test_upstream_cod_returned_verbatim(self, client, upstream):
        upstream.get(**WEATHER).mock(
            return_value=Response(404, json={"cod": "404", "message": "city not found"})
        )

        resp = await client.get("/api/weather", params={"city": "Atlantis"})

        assert resp.status_code == 404
        assert resp.json() == {"error": "city not found"}

    async def test_connection_reset_is_generic_500(self, client, upstream):
        upstream.get(**WEATHER).mock(side_effect=httpx.ConnectError("connection reset by peer"))

        resp = await client.get("/api/weather", params={"city": "Paris"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Something went wrong"}

    @pytest.mark.parametrize("body", [
        b'{"cod": 200, "name": "P", "main": {"temp": NaN}, "weather": [{"description": "fog"}]}',
        b'{"cod": 200, "name": "P", "main": {"temp": 1e999}, "weather": [{"description": "fog"}]}',
    ])
    async def test_non_finite_temperature_is_generic_500(self, client, upstream, body):
        upstream.get(**WEATHER).mock(return_value=Response(200, content=body))

        resp = await client.get("/api/weather", params={"city": "P"})

        assert resp.status_code == 500
        assert resp.json() == {"error": "Something went wrong"}

    async def test_same_request_twice_is_independent(self, client, upstream):
        route = upstream.get(**WEATHER).mock(return_value=Response(200, json={
            "cod": 200, "name": "Oslo", "main": {"temp": -3}, "weather": [{"description": "snow"}],
        }))

        first = await client.get("/api/weather", params={"city": "Oslo"})
        second = await client.get("/api/weather", params={"city": "Oslo"})

        assert first.json() == second.json() == {"city": "Oslo", "temperature": -3, "description": "snow"}
        assert route.call_count == 2


class TestDog:

    async def test_image_url(self, client, upstream):
        upstream.get(**DOG).mock(return_value=Response(200, json={
            "message": "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg",
            "status": "success",
        }))

        resp = await client.get("/api/dog")

        assert resp.status_code == 200
        assert resp.json() == {"imageUrl": "https://images.dog.ceo/breeds/hound-afghan/n02088094_1003.jpg"}

    async def test_non_json_body_is_generic_500(self, client, upstream):
        upstream.get(**DOG).mock(return_value=Response(200, text="<html>maintenance</html>"))

        resp = await client.get("/api/dog")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch dog image"}


class TestSample:

    async def test_passthrough(self, client, upstream):
        users = [{"id": 1, "name": "Leanne Graham"}]
        upstream.get(**SAMPLE).mock(return_value=Response(200, json=users))

        resp = await client.get("/api/sample")

        assert resp.status_code == 200
        assert resp.json() == users

    @pytest.mark.parametrize("body", [b'{"x": NaN}', b'[Infinity]', b'{"x": -Infinity}'])
    async def test_non_standard_constants_are_generic_500(self, client, upstream, body):
        upstream.get(**SAMPLE).mock(return_value=Response(200, content=body))

        resp = await client.get("/api/sample")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch sample data"}

    async def test_transport_failure_is_structured(self, client, upstream):
        upstream.get(**SAMPLE).mock(side_effect=httpx.ReadError("connection reset"))

        resp = await client.get("/api/sample")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to fetch sample data"}


class TestHeaders:

    async def test_correlation_id_echoed(self, client, upstream):
        upstream.get(**DOG).mock(return_value=Response(200, json={"message": "u"}))

        resp = await client.get("/api/dog", headers={"X-Correlation-ID": "abc-123"})

        assert resp.headers["X-Correlation-ID"] == "abc-123"
        assert int(resp.headers["X-Latency-Ms"]) >= 0

    async def test_correlation_id_generated(self, client, upstream):
        resp = await client.get("/api/weather")

        assert resp.status_code == 400
        assert resp.headers["X-Correlation-ID"]


class TestOps:

    @pytest.mark.parametrize("path,status", [
        ("/startup", "started"), ("/health", "healthy"), ("/ready", "ready"),
    ])
    async def test_probes(self, client, path, status):
        resp = await client.get(path)

        assert resp.status_code == 200
        assert resp.json()["status"] == status
        assert resp.json()["service"] == "api-proxy"

    async def test_list_endpoints_hides_credential(self, client):
        resp = await client.get("/ops/endpoints")

        assert resp.status_code == 200
        by_name = {e["name"]: e for e in resp.json()}
        assert set(by_name) == {"dog", "weather", "sample"}
        assert by_name["weather"]["required_params"] == ["city"]
        assert by_name["weather"]["credential_configured"] is True
        assert TEST_API_KEY not in resp.text
