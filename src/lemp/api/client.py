"""HTTP client for the Proxmox VE REST API."""

import logging
import time
import urllib.parse
from typing import Any, Dict, List, Optional

import httpx

from lemp.errors import ProxmoxAPIError, ProxmoxResponseError
from lemp.models.config import ProxmoxConfig
from lemp.models.inventory import InventoryResource, StorageContent


logger = logging.getLogger(__name__)


class ProxmoxClient:
    """Thin synchronous wrapper around the endpoints lemp needs."""

    def __init__(
        self,
        config: ProxmoxConfig,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize API client."""
        self.config = config
        self.base_url = config.api_url
        self.transport = transport
        self.timeout = timeout if timeout is not None else httpx.Timeout(5.0)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            transport=self.transport,
            verify=self.config.verify_tls,
            timeout=self.timeout,
            headers={"Authorization": self.config.auth_header},
        )

    def request(
        self,
        method: str,
        path: str,
        operation: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the `data` member of the JSON body."""
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            with self._client() as client:
                response = client.request(method, path, data=data)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProxmoxAPIError(
                f"Failed to {operation}: HTTP {e.response.status_code} from {url}. "
                "Check API URL, token, secret and permissions."
            ) from e
        except httpx.RequestError as e:
            raise ProxmoxAPIError(
                f"Failed to {operation} from Proxmox API at {self.base_url}: {e}. "
                "Check API URL and network connectivity."
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ProxmoxResponseError(
                f"Failed to parse response while trying to {operation}", response.text
            ) from e

        if not isinstance(body, dict) or "data" not in body:
            raise ProxmoxResponseError(
                f"Response to {operation} has no 'data' member", response.text
            )
        return body["data"]

    def get(self, path: str, operation: str) -> Any:
        return self.request("GET", path, operation)

    def post(self, path: str, operation: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, operation, data=data)

    def _get_list(self, path: str, operation: str) -> List[Dict[str, Any]]:
        data = self.get(path, operation)
        if not isinstance(data, list):
            raise ProxmoxResponseError(f"Expected a list while trying to {operation}", repr(data))
        return data

    def cluster_resources(self) -> List[InventoryResource]:
        """List every resource known to the cluster, in API order."""
        operation = "fetch cluster resources"
        entries = self._get_list("/cluster/resources", operation)
        try:
            return [InventoryResource(**entry) for entry in entries]
        except (TypeError, ValueError) as e:
            raise ProxmoxResponseError(
                f"Failed to parse resources while trying to {operation}: {e}", repr(entries)
            ) from e

    def storage_content(self, node: str, storage: str) -> List[StorageContent]:
        """List the content of a storage pool on a node, in API order."""
        operation = f"fetch content for node '{node}', storage '{storage}'"
        path = f"/nodes/{_quote(node)}/storage/{_quote(storage)}/content"
        entries = self._get_list(path, operation)
        try:
            return [StorageContent(**entry) for entry in entries]
        except (TypeError, ValueError) as e:
            raise ProxmoxResponseError(
                f"Failed to parse storage content while trying to {operation}: {e}", repr(entries)
            ) from e

    def create_container(self, node: str, params: Dict[str, Any]) -> str:
        """Create an LXC container and return the task UPID."""
        upid = self.post(f"/nodes/{_quote(node)}/lxc", f"create container {params.get('vmid')}", params)
        if not isinstance(upid, str) or not upid:
            raise ProxmoxResponseError("Container creation did not return a task id", repr(upid))
        return upid

    def task_status(self, node: str, upid: str) -> Dict[str, Any]:
        return self.get(
            f"/nodes/{_quote(node)}/tasks/{_quote(upid)}/status",
            f"read status of task {upid}",
        )

    def wait_for_task(self, node: str, upid: str, timeout: float = 300, interval: float = 2.0) -> Dict[str, Any]:
        """Block until a task stops; raise unless it ended with OK."""
        deadline = time.monotonic() + timeout
        while True:
            status = self.task_status(node, upid)
            if status.get("status") == "stopped":
                exitstatus = status.get("exitstatus", "OK")
                if exitstatus != "OK":
                    raise ProxmoxAPIError(f"Task {upid} failed: {exitstatus}")
                return status

            if time.monotonic() >= deadline:
                raise ProxmoxAPIError(f"Timed out after {timeout}s waiting for task {upid}")
            time.sleep(interval)

    def container_config(self, node: str, vmid: int) -> Dict[str, Any]:
        return self.get(f"/nodes/{_quote(node)}/lxc/{vmid}/config", f"read config of container {vmid}")

    def container_interfaces(self, node: str, vmid: int) -> List[Dict[str, Any]]:
        return self._get_list(
            f"/nodes/{_quote(node)}/lxc/{vmid}/interfaces",
            f"read interfaces of container {vmid}",
        )


def _quote(segment: str) -> str:
    return urllib.parse.quote(str(segment), safe="")
