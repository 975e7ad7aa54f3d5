"""Tests for SubsonicClient.

All HTTP calls go through httpx.MockTransport - no real server requests are
made. Responses come from the JSON fixtures file.

Test Coverage:
- Request building (endpoint path, auth and endpoint parameters)
- Envelope validation and error mapping
- Transport failures and cancellation
- Artist/album/song parsing
- Stream URL construction
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from src.errors import ProtocolError, TransportError
from src.subsonic.client import SubsonicClient
from src.subsonic.exceptions import (
    SubsonicAuthenticationError,
    SubsonicError,
    SubsonicNotFoundError,
    SubsonicResponseError,
    SubsonicTransportError,
)
from src.subsonic.models import Album, Artist, Song, SubsonicConfig


@pytest.fixture
def fixtures() -> Dict[str, Any]:
    """Load Subsonic API response fixtures from JSON file."""
    fixtures_path = Path(__file__).parent / "fixtures" / "subsonic_responses.json"
    with open(fixtures_path, "r") as f:
        return json.load(f)


@pytest.fixture
def config() -> SubsonicConfig:
    return SubsonicConfig(
        url="https://music.example.com",
        username="testuser",
        password="testpass",
    )


class Recorder:
    """Mock transport handler that records requests and replays a responder."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


def make_client(config: SubsonicConfig, responder: Callable[[httpx.Request], httpx.Response]):
    recorder = Recorder(responder)
    client = SubsonicClient(config, transport=httpx.MockTransport(recorder))
    return client, recorder


def json_response(body: Dict[str, Any], status_code: int = 200):
    return lambda request: httpx.Response(status_code, json=body)


class TestRequestBuilding:
    """Tests for URL and query parameter construction."""

    @pytest.mark.asyncio
    async def test_ping_sends_auth_and_version_params(self, config, fixtures):
        client, recorder = make_client(config, json_response(fixtures["ping_success"]))

        assert await client.ping() is True

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/ping.view"
        params = request.url.params
        assert params["u"] == "testuser"
        assert params["p"] == "testpass"
        assert params["v"] == "1.16.1"
        assert params["c"] == "navitui"
        assert params["f"] == "json"
        await client.close()

    @pytest.mark.asyncio
    async def test_base_url_path_prefix_is_kept(self, fixtures):
        config = SubsonicConfig(
            url="https://example.com/navidrome/", username="u", password="p"
        )
        client, recorder = make_client(config, json_response(fixtures["ping_success"]))

        await client.ping()

        assert recorder.requests[0].url.path == "/navidrome/rest/ping.view"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_artist_albums_sends_id(self, config, fixtures):
        client, recorder = make_client(config, json_response(fixtures["artist_albums"]))

        await client.get_artist_albums("ar-1")

        request = recorder.requests[0]
        assert request.url.path == "/rest/getArtist.view"
        assert request.url.params["id"] == "ar-1"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_album_list_params(self, config, fixtures):
        client, recorder = make_client(config, json_response(fixtures["album_list"]))

        albums = await client.get_album_list(offset=20)

        params = recorder.requests[0].url.params
        assert recorder.requests[0].url.path == "/rest/getAlbumList2.view"
        assert params["size"] == "10"
        assert params["type"] == "alphabeticalByArtist"
        assert params["offset"] == "20"
        assert [a.id for a in albums] == ["al-10", "al-20"]
        await client.close()


class TestParsing:
    """Tests for converting responses into catalog models."""

    @pytest.mark.asyncio
    async def test_get_artists_flattens_index_groups_in_order(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["artists"]))

        artists = await client.get_artists()

        assert [a.id for a in artists] == ["ar-3", "ar-1", "007"]
        assert [a.name for a in artists] == ["ABBA", "Air", "2Pac"]
        assert all(isinstance(a, Artist) and a.albums == [] for a in artists)
        await client.close()

    @pytest.mark.asyncio
    async def test_identifiers_stay_strings(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["artists"]))

        artists = await client.get_artists()

        # Leading zeros survive, nothing is parsed as a number
        assert artists[2].id == "007"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_artist_albums(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["artist_albums"]))

        albums = await client.get_artist_albums("ar-1")

        assert albums == [
            Album(id="al-10", name="Moon Safari", artist_id="ar-1", artist="Air", genre="Electronic"),
            Album(id="al-11", name="Talkie Walkie", artist_id="ar-1", artist="Air", genre=""),
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_get_album_songs_uses_album_context(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["album"]))

        songs = await client.get_album_songs("al-10")

        assert [s.id for s in songs] == ["s-1", "s-2"]  # video filtered out
        sexy_boy = songs[1]
        assert sexy_boy == Song(
            id="s-2",
            title="Sexy Boy",
            artist="Air",
            album="Moon Safari",
            genre="Electronic",
            artist_id="ar-1",
            album_id="al-10",
        )
        await client.close()

    @pytest.mark.asyncio
    async def test_empty_artist_has_no_albums(self, config):
        body = {"subsonic-response": {"status": "ok", "artist": {"id": "ar-9", "name": "Nobody"}}}
        client, _ = make_client(config, json_response(body))

        assert await client.get_artist_albums("ar-9") == []
        await client.close()


class TestErrorHandling:
    """Tests for mapping failures onto the error taxonomy."""

    @pytest.mark.asyncio
    async def test_failed_status_maps_auth_error(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["auth_failure"]))

        with pytest.raises(SubsonicAuthenticationError) as exc_info:
            await client.ping()

        assert exc_info.value.code == 40
        assert exc_info.value.endpoint == "ping"
        assert "Wrong username or password" in str(exc_info.value)
        assert isinstance(exc_info.value, ProtocolError)
        await client.close()

    @pytest.mark.asyncio
    async def test_failed_status_maps_not_found(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["not_found"]))

        with pytest.raises(SubsonicNotFoundError) as exc_info:
            await client.get_album_songs("missing")

        assert exc_info.value.endpoint == "getAlbum"
        await client.close()

    @pytest.mark.asyncio
    async def test_failed_status_without_error_object(self, config, fixtures):
        client, _ = make_client(config, json_response(fixtures["failed_without_error"]))

        with pytest.raises(SubsonicError) as exc_info:
            await client.get_artists()

        assert "status=failed" in str(exc_info.value)
        await client.close()

    @pytest.mark.asyncio
    async def test_non_200_status(self, config):
        client, _ = make_client(config, lambda request: httpx.Response(503, text="busy"))

        with pytest.raises(SubsonicResponseError) as exc_info:
            await client.get_artists()

        assert exc_info.value.endpoint == "getArtists"
        assert "503" in str(exc_info.value)
        await client.close()

    @pytest.mark.asyncio
    async def test_malformed_body(self, config):
        client, _ = make_client(config, lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(SubsonicResponseError):
            await client.get_artists()
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_envelope(self, config):
        client, _ = make_client(config, json_response({"status": "ok"}))

        with pytest.raises(SubsonicResponseError):
            await client.ping()
        await client.close()

    @pytest.mark.asyncio
    async def test_non_object_error_is_response_error(self, config):
        body = {"subsonic-response": {"status": "failed", "error": "boom"}}
        client, _ = make_client(config, json_response(body))

        with pytest.raises(SubsonicResponseError) as exc_info:
            await client.ping()

        assert exc_info.value.endpoint == "ping"
        assert "boom" in str(exc_info.value)
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"artists": {"index": [{"artist": ["x"]}]}},
            {"artists": {"index": ["A"]}},
            {"artists": "none"},
        ],
    )
    async def test_wrongly_shaped_artists_is_response_error(self, config, payload):
        body = {"subsonic-response": {"status": "ok", "version": "1.16.1", **payload}}
        client, _ = make_client(config, json_response(body))

        with pytest.raises(SubsonicResponseError) as exc_info:
            await client.get_artists()

        assert isinstance(exc_info.value, ProtocolError)
        assert exc_info.value.endpoint == "getArtists"
        await client.close()

    @pytest.mark.asyncio
    async def test_wrongly_shaped_album_songs_is_response_error(self, config):
        body = {"subsonic-response": {"status": "ok", "album": {"id": "al-1", "song": [42]}}}
        client, _ = make_client(config, json_response(body))

        with pytest.raises(SubsonicResponseError) as exc_info:
            await client.get_album_songs("al-1")

        assert exc_info.value.endpoint == "getAlbum"
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_failure_is_transport_error(self, config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(config, refuse)

        with pytest.raises(SubsonicTransportError) as exc_info:
            await client.ping()

        assert isinstance(exc_info.value, TransportError)
        assert not isinstance(exc_info.value, ProtocolError)
        assert exc_info.value.endpoint == "ping"
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        await client.close()

    @pytest.mark.asyncio
    async def test_cancellation_is_not_a_server_error(self, config):
        started = asyncio.Event()

        class SlowTransport(httpx.AsyncBaseTransport):
            async def handle_async_request(self, request):
                started.set()
                await asyncio.sleep(30)
                return httpx.Response(200, json={})

        client = SubsonicClient(config, transport=SlowTransport())
        task = asyncio.ensure_future(client.get_artists())
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await client.close()


class TestStreamURL:
    """Tests for build_stream_url()."""

    def test_stream_url_contains_auth_and_id(self, config):
        client = SubsonicClient(config)

        url = httpx.URL(client.build_stream_url("s-1"))

        assert url.scheme == "https"
        assert url.host == "music.example.com"
        assert url.path == "/rest/stream.view"
        assert url.params["id"] == "s-1"
        assert url.params["u"] == "testuser"
        assert url.params["p"] == "testpass"
        assert url.params["f"] == "json"

    def test_stream_url_is_deterministic_and_offline(self, config):
        def fail(request):
            raise AssertionError("build_stream_url must not make requests")

        client, recorder = make_client(config, fail)
        other, _ = make_client(config, fail)

        assert client.build_stream_url("abc") == client.build_stream_url("abc")
        assert client.build_stream_url("abc") == other.build_stream_url("abc")
        assert client.build_stream_url("abc") != client.build_stream_url("abd")
        assert recorder.requests == []

    def test_stream_url_escapes_identifier(self, config):
        client = SubsonicClient(config)

        url = httpx.URL(client.build_stream_url("a b&c"))

        assert url.params["id"] == "a b&c"
