# Path: tests/test_protocol_handlers.py
"""
Tests for the HTTP fetch collaborator.

A local aiohttp server plays the distribution mirror:
    /v18.0.0/node-v18.0.0-linux-x64.tar.gz
    /v18.0.0/SHASUMS256.txt
"""

import asyncio
import socket

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from runtime_downloader.engine.errors import (
    ConnectivityError,
    FetchError,
    IntegrityError,
    NotFoundError,
)
from runtime_downloader.engine.installer import AtomicInstaller
from runtime_downloader.engine.models import AcquisitionRequest, FetchOptions
from runtime_downloader.engine.protocol_handlers import HTTPHandler, build_url, parse_checksums

from tests.fakes import make_tarball, sha256, RUNTIME_FILES

ARCHIVE = 'node-v18.0.0-linux-x64.tar.gz'


def make_app(payload: bytes, checksums: str, seen_headers: list):
    async def serve(request):
        seen_headers.append(dict(request.headers))
        name = request.match_info['name']
        if name == 'SHASUMS256.txt':
            return web.Response(text=checksums)
        if name == ARCHIVE:
            return web.Response(body=payload)
        raise web.HTTPNotFound()

    app = web.Application()
    app.router.add_get('/v18.0.0/{name}', serve)
    return app


def run_with_mirror(app, scenario):
    async def main():
        server = TestServer(app)
        await server.start_server()
        try:
            return await scenario(f'http://{server.host}:{server.port}')
        finally:
            await server.close()

    return asyncio.run(main())


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]


def test_build_url():
    assert build_url('https://nodejs.org/dist/', '18.0.0', ARCHIVE) == (
        'https://nodejs.org/dist/v18.0.0/node-v18.0.0-linux-x64.tar.gz'
    )


def test_parse_checksums():
    text = (
        'ABCDEF0123  node-v18.0.0-linux-x64.tar.gz\n'
        '\n'
        '0011  *win-x64/node.exe\n'
        '2233  ./node-v18.0.0.tar.gz\n'
        'garbage\n'
    )

    assert parse_checksums(text) == {
        'node-v18.0.0-linux-x64.tar.gz': 'abcdef0123',
        'win-x64/node.exe': '0011',
        'node-v18.0.0.tar.gz': '2233',
    }


def test_open_artifact_streams_and_resolves_digest(config):
    payload = make_tarball()
    headers = []
    app = make_app(payload, f'{sha256(payload)}  {ARCHIVE}\n', headers)

    async def scenario(base_url):
        async with HTTPHandler(config) as handler:
            options = FetchOptions(mirror=base_url, headers=(('X-Test', 'yes'),))
            async with handler.open_artifact('18.0.0', ARCHIVE, options) as response:
                body = b''.join([chunk async for chunk in response.chunks])
                digest = await response.expected_digest
                return body, digest, response.result

    body, digest, result = run_with_mirror(app, scenario)

    assert body == payload
    assert digest == sha256(payload)
    assert result.file_size == len(payload)
    assert result.status_code == 200
    assert all(h.get('User-Agent') == 'RuntimeDownloader/1.0' for h in headers)
    assert any(h.get('X-Test') == 'yes' for h in headers)


def test_open_artifact_without_verification_has_no_digest(config):
    app = make_app(b'payload', '', [])

    async def scenario(base_url):
        async with HTTPHandler(config) as handler:
            options = FetchOptions(mirror=base_url, verify_checksums=False)
            async with handler.open_artifact('18.0.0', ARCHIVE, options) as response:
                return response.expected_digest

    assert run_with_mirror(app, scenario) is None


def test_open_artifact_missing_raises_fetch_error_with_status(config):
    app = make_app(b'', '', [])

    async def scenario(base_url):
        async with HTTPHandler(config) as handler:
            async with handler.open_artifact('18.0.0', 'node-v18.0.0-plan9-x64.tar.gz', FetchOptions(mirror=base_url)):
                pass

    with pytest.raises(FetchError) as exc_info:
        run_with_mirror(app, scenario)

    assert exc_info.value.status == 404
    assert 'HTTP 404' in str(exc_info.value)


def test_acquire_over_http(config, tmp_path):
    payload = make_tarball()
    app = make_app(payload, f'{sha256(payload)}  {ARCHIVE}\n', [])
    output = tmp_path / 'out' / '18.0.0'

    async def scenario(base_url):
        async with AtomicInstaller(config=config) as installer:
            return await installer.acquire(AcquisitionRequest.build('18.0.0', output, 'x64', 'linux', mirror=base_url))

    assert run_with_mirror(app, scenario) == output
    assert (output / 'bin' / 'node').read_bytes() == RUNTIME_FILES['bin/node']


def test_acquire_over_http_unlisted_checksum(config, tmp_path):
    payload = make_tarball()
    app = make_app(payload, f'{sha256(payload)}  some-other-file.tar.gz\n', [])
    output = tmp_path / 'out' / '18.0.0'

    async def scenario(base_url):
        async with AtomicInstaller(config=config) as installer:
            return await installer.acquire(AcquisitionRequest.build('18.0.0', output, 'x64', 'linux', mirror=base_url))

    with pytest.raises(IntegrityError, match='No checksum published'):
        run_with_mirror(app, scenario)

    assert not output.exists()


def test_acquire_over_http_not_found(config, tmp_path):
    app = make_app(b'', '', [])
    output = tmp_path / 'out' / '18.0.0'

    async def scenario(base_url):
        async with AtomicInstaller(config=config) as installer:
            return await installer.acquire(AcquisitionRequest.build('18.0.0', output, 'x64', 'sunos', mirror=base_url))

    with pytest.raises(NotFoundError, match='No Node.js binaries available for 18.0.0 on sunos x64'):
        run_with_mirror(app, scenario)


def test_acquire_unreachable_mirror(config, tmp_path):
    mirror = f'http://127.0.0.1:{unused_port()}/dist'
    output = tmp_path / 'out' / '18.0.0'

    async def scenario():
        async with AtomicInstaller(config=config) as installer:
            return await installer.acquire(AcquisitionRequest.build('18.0.0', output, 'x64', 'linux', mirror=mirror))

    with pytest.raises(ConnectivityError, match=f'Could not connect to {mirror}'):
        asyncio.run(scenario())

    assert not output.exists()
