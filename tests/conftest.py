"""shared fixtures: an in-memory nuget registry served through httpx.MockTransport."""
import base64
import hashlib
import re
import shutil
import sys
import tempfile
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nugetdl.registry.nuget import NuGetRegistry

BASE_URL = "https://registry.test/api/v2"

CONTENT_PATH = re.compile(r"^/api/v2/package/(?P<name>[^/]+)/(?P<version>[^/]+)$")
METADATA_PATH = re.compile(r"^/api/v2/Packages\(Id='(?P<name>[^']*)',Version='(?P<version>[^']*)'\)$")

METADATA_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<entry xml:base="https://registry.test/api/v2" xmlns="http://www.w3.org/2005/Atom" xmlns:d="http://schemas.microsoft.com/ado/2007/08/dataservices" xmlns:m="http://schemas.microsoft.com/ado/2007/08/dataservices/metadata">
  <id>https://registry.test/api/v2/Packages(Id='{name}',Version='{version}')</id>
  <title type="text">{name}</title>
  <m:properties>
    <d:Id>{name}</d:Id>
    <d:Version>{version}</d:Version>
    <d:PackageHash>{package_hash}</d:PackageHash>
    <d:PackageHashAlgorithm>{algorithm}</d:PackageHashAlgorithm>
    <d:PackageSize m:type="Edm.Int64">{size}</d:PackageSize>
  </m:properties>
</entry>
"""


def sha512_b64(data: bytes) -> str:
    return base64.b64encode(hashlib.sha512(data).digest()).decode()


class FakeNuGetServer:
    """records every request it serves so tests can count network fetches."""

    def __init__(self):
        self.packages = {}
        self.algorithms = {}
        self.hashes = {}
        self.raw_metadata = {}
        self.metadata_requests = []
        self.content_requests = []
        self.metadata_status = 200

    def add_package(self, name: str, version: str, content: bytes, algorithm: str = "SHA512", package_hash: str = None):
        self.packages[(name, version)] = content
        self.algorithms[(name, version)] = algorithm
        self.hashes[(name, version)] = package_hash or sha512_b64(content)

    def set_raw_metadata(self, name: str, version: str, body: bytes):
        self.raw_metadata[(name, version)] = body

    def metadata_xml(self, name: str, version: str) -> str:
        return METADATA_TEMPLATE.format(
            name=name,
            version=version,
            package_hash=self.hashes[(name, version)],
            algorithm=self.algorithms[(name, version)],
            size=len(self.packages[(name, version)]),
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        match = METADATA_PATH.match(path)
        if match:
            key = (match["name"], match["version"])
            self.metadata_requests.append(key)
            if self.metadata_status != 200:
                return httpx.Response(self.metadata_status)
            if key in self.raw_metadata:
                return httpx.Response(200, content=self.raw_metadata[key])
            if key not in self.packages:
                return httpx.Response(404, text="Not found")
            return httpx.Response(
                200,
                content=self.metadata_xml(*key).encode("utf-8"),
                headers={"content-type": "application/atom+xml;type=entry;charset=utf-8"},
            )

        match = CONTENT_PATH.match(path)
        if match:
            key = (match["name"], match["version"])
            self.content_requests.append(key)
            if key not in self.packages:
                return httpx.Response(404, text="Not found")
            return httpx.Response(
                200,
                content=self.packages[key],
                headers={"content-type": "binary/octet-stream"},
            )

        return httpx.Response(404)


@pytest.fixture
def server():
    return FakeNuGetServer()


@pytest.fixture
def registry(server):
    client = httpx.Client(transport=httpx.MockTransport(server.handler))
    yield NuGetRegistry(BASE_URL, client=client)
    client.close()


@pytest.fixture
def temp_dir():
    """create a temporary directory."""
    path = Path(tempfile.mkdtemp())
    yield path
    if path.exists():
        shutil.rmtree(path)
