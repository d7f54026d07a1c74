"""Tests for the dish image store."""

import asyncio
import threading

import httpx

from almadle.adapters.image_store import AssetImageStore


def _store(roots, handler=None) -> AssetImageStore:
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(404)))
    return AssetImageStore(
        roots=tuple(roots), http_client=httpx.AsyncClient(transport=transport)
    )


def test_local_reference_resolves_by_basename_in_root_order(tmp_path) -> None:
    data_dir = tmp_path / "data"
    public_dir = tmp_path / "public"
    data_dir.mkdir()
    public_dir.mkdir()
    (public_dir / "soep.jpg").write_bytes(b"public-soep")
    (public_dir / "pasta.jpg").write_bytes(b"public-pasta")
    (data_dir / "pasta.jpg").write_bytes(b"data-pasta")
    store = _store([data_dir, public_dir])

    assert asyncio.run(store.load("images/pasta.jpg")) == b"data-pasta"
    assert asyncio.run(store.load("/images/soep.jpg")) == b"public-soep"


def test_missing_or_empty_reference_returns_none(tmp_path) -> None:
    store = _store([tmp_path])

    assert asyncio.run(store.load("images/missing.jpg")) is None
    assert asyncio.run(store.load("")) is None
    assert asyncio.run(store.load("images/..")) is None


def test_reference_cannot_escape_roots(tmp_path) -> None:
    root = tmp_path / "images"
    root.mkdir()
    (tmp_path / "secret.txt").write_bytes(b"secret")
    store = _store([root])

    assert asyncio.run(store.load("../secret.txt")) is None
    assert asyncio.run(store.load("..\\secret.txt")) is None


def test_remote_reference_is_fetched() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "cdn.example.com"
        return httpx.Response(200, content=b"remote-bytes")

    store = _store([], handler)

    assert asyncio.run(store.load("https://cdn.example.com/a.jpg")) == b"remote-bytes"


def test_remote_failure_returns_none() -> None:
    store = _store([], lambda request: httpx.Response(500))

    assert asyncio.run(store.load("https://cdn.example.com/a.jpg")) is None


def test_create_and_close() -> None:
    store = AssetImageStore.create(["data/images"], timeout=2.0)
    assert store.timeout == 2.0
    asyncio.run(store.close())


def test_local_read_runs_off_the_event_loop_thread(tmp_path) -> None:
    (tmp_path / "pasta.jpg").write_bytes(b"pasta")
    store = _store([tmp_path])
    read_threads = []
    read_local = store._read_local

    def tracking_read(image_ref: str) -> bytes | None:
        read_threads.append(threading.get_ident())
        return read_local(image_ref)

    store._read_local = tracking_read

    assert asyncio.run(store.load("images/pasta.jpg")) == b"pasta"
    assert read_threads
    assert read_threads[0] != threading.get_ident()
