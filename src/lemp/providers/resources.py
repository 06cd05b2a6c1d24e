"""Template listing and container ID allocation."""

import logging
from typing import Iterable, List

from lemp.api.client import ProxmoxClient
from lemp.models.inventory import InventoryResource, StorageContent


logger = logging.getLogger(__name__)

DEFAULT_FLOOR = 99
STRATEGIES = ("last", "max")


def select_templates(entries: Iterable[StorageContent]) -> List[str]:
    """Volume ids of template images, in the order given."""
    return [entry.volid for entry in entries if entry.is_template]


def list_templates(client: ProxmoxClient, node: str, storage: str) -> List[str]:
    """List LXC templates available on a storage pool of a node."""
    templates = select_templates(client.storage_content(node, storage))
    if not templates:
        # Not an error: the storage simply holds no templates
        logger.warning(f"No LXC templates ('vztmpl') found on node '{node}' in storage '{storage}'")
    return templates


def next_container_id(
    resources: Iterable[InventoryResource],
    strategy: str = "last",
    floor: int = DEFAULT_FLOOR,
) -> int:
    """Compute the ID a new container should get.

    ``last`` trusts the API ordering and takes the ID of the last container
    returned; ``max`` takes the highest container ID regardless of order.
    Either way an empty inventory yields ``floor + 1``.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown allocation strategy: {strategy}")

    ids = [resource.vmid for resource in resources if resource.is_container]

    if strategy == "max":
        known = [vmid for vmid in ids if vmid is not None]
        last_id = max(known) if known else floor
    else:
        last_id = ids[-1] if ids and ids[-1] is not None else floor

    return last_id + 1


def allocate_container_id(client: ProxmoxClient, strategy: str = "last", floor: int = DEFAULT_FLOOR) -> int:
    """Fetch the inventory and compute the next container ID."""
    resources = client.cluster_resources()
    next_id = next_container_id(resources, strategy=strategy, floor=floor)
    logger.debug(f"Next container ID ({strategy}): {next_id}")
    return next_id
