import logging
from typing import Optional, TYPE_CHECKING

import httpx
from lxml import etree

from .client import RegistryClient
from ..domain.errors import MetadataParseError, MissingFieldError, RegistryTransportError
from ..domain.models import HashAlgorithm, PackageDigest

if TYPE_CHECKING:
    from rich.progress import TaskID

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://www.nuget.org/api/v2"

HASH_FIELD = "PackageHash"
HASH_ALGORITHM_FIELD = "PackageHashAlgorithm"

class NuGetRegistry(RegistryClient):
    """client for the nuget v2 (odata) package api."""

    def __init__(
        self,
        base_url: str = DEFAULT_REGISTRY_URL,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.Client(follow_redirects=True, timeout=timeout)
        self._parser = etree.XMLParser(resolve_entities=False, no_network=True)

    def __enter__(self) -> "NuGetRegistry":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        if self._owns_client:
            self.client.close()

    def metadata_url(self, package_name: str, version: str) -> str:
        return f"{self.base_url}/Packages(Id='{package_name}',Version='{version}')"

    def content_url(self, package_name: str, version: str) -> str:
        return f"{self.base_url}/package/{package_name}/{version}"

    def get_package_hash(self, package_name: str, version: str) -> PackageDigest:
        """
        fetch the digest the registry reports for a package version.

        the metadata document is scanned for the hash fields by element name
        only; its overall structure is not validated.

        raises:
            RegistryTransportError: request failed or returned an error status
            MetadataParseError: response is not an xml document
            MissingFieldError: hash or hash algorithm field is absent
        """
        url = self.metadata_url(package_name, version)
        logger.debug(f"fetching metadata from {url}")
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RegistryTransportError(
                package_name, version, url, f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL is not an HTTPError subclass
            raise RegistryTransportError(package_name, version, url, str(e)) from e

        fields = self._scan_fields(response.content, package_name, version)

        if HASH_FIELD not in fields:
            raise MissingFieldError(package_name, version, HASH_FIELD)
        if HASH_ALGORITHM_FIELD not in fields:
            raise MissingFieldError(package_name, version, HASH_ALGORITHM_FIELD)

        return PackageDigest(
            hash=fields[HASH_FIELD],
            algorithm=HashAlgorithm.from_string(fields[HASH_ALGORITHM_FIELD]),
        )

    def _scan_fields(self, content: bytes, package_name: str, version: str) -> dict:
        try:
            root = etree.fromstring(content, parser=self._parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise MetadataParseError(package_name, version, str(e)) from e
        if root is None:
            raise MetadataParseError(package_name, version, "empty document")

        fields = {}
        for element in root.iter():
            # skip comments and processing instructions
            if not isinstance(element.tag, str):
                continue
            local_name = etree.QName(element).localname
            if local_name in (HASH_FIELD, HASH_ALGORITHM_FIELD) and element.text and element.text.strip():
                fields[local_name] = element.text.strip()
        return fields

    def download_package_bytes(
        self,
        package_name: str,
        version: str,
        progress=None,
        task_id: Optional["TaskID"] = None,
    ) -> bytes:
        """
        download a package archive into memory.

        args:
            package_name: name of the package
            version: exact version string
            progress: optional Progress instance for tracking download
            task_id: optional task id for updating progress

        returns:
            the full response body
        """
        url = self.content_url(package_name, version)
        logger.debug(f"downloading package from {url}")
        buffer = bytearray()
        try:
            with self.client.stream("GET", url) as response:
                response.raise_for_status()

                if "content-length" in response.headers and progress and task_id is not None:
                    progress.update(task_id, total=int(response.headers["content-length"]))

                for chunk in response.iter_bytes():
                    buffer.extend(chunk)
                    if progress and task_id is not None:
                        progress.update(task_id, completed=len(buffer))
        except httpx.HTTPStatusError as e:
            raise RegistryTransportError(
                package_name, version, url, f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RegistryTransportError(package_name, version, url, str(e)) from e

        logger.debug(f"downloaded {len(buffer)} bytes for {package_name} {version}")
        return bytes(buffer)
