"""Container provider: create the LXC container, bootstrap SSH, run Ansible."""

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lemp.api.client import ProxmoxClient
from lemp.errors import ProvisionError, ProxmoxResponseError
from lemp.models.config import ProvisionConfig
from lemp.models.tfvars import TfVars
from lemp.providers.base import BaseProvider, ProviderStatus
from lemp.providers.resources import next_container_id
from lemp.utils.process import run_command


logger = logging.getLogger(__name__)


BOOTSTRAP_SCRIPT = (
    "apt-get update && "
    "DEBIAN_FRONTEND=noninteractive apt-get -y upgrade && "
    "DEBIAN_FRONTEND=noninteractive apt-get install -y openssh-server && "
    "systemctl enable ssh && systemctl start ssh"
)


@dataclass
class ProvisionPlan:
    """Everything a provisioning run is about to do."""
    vmid: int
    create_params: Dict[str, Any]
    bootstrap_cmd: List[str]
    create: bool = True
    ansible_cmd: List[str] = field(default_factory=list)


def strip_mask(address: str) -> str:
    """Drop the /NN suffix from an address."""
    return address.split("/", 1)[0]


def parse_net_config(value: str) -> Dict[str, str]:
    """Split a Proxmox net0 string (name=eth0,bridge=vmbr0,ip=...) into a dict."""
    result = {}
    for part in value.split(","):
        if "=" in part:
            key, val = part.split("=", 1)
            result[key.strip()] = val.strip()
    return result


class ContainerProvider(BaseProvider):
    """Provider for the single LXC container described by a variable file."""

    def __init__(self, client: ProxmoxClient, config: ProvisionConfig, allocation_floor: int = 99):
        """Initialize container provider."""
        self.client = client
        self.config = config
        self.allocation_floor = allocation_floor

    def resolve_vmid(self, spec: TfVars) -> int:
        """Container ID from the file, or a fresh one for DHCP setups."""
        if spec.container_id is not None:
            return spec.container_id
        resources = self.client.cluster_resources()
        return next_container_id(resources, strategy="max", floor=self.allocation_floor)

    def status(self, spec: TfVars, vmid: Optional[int] = None) -> ProviderStatus:
        """Check whether the container ID is free, ours, or taken by something else."""
        vmid = vmid if vmid is not None else self.resolve_vmid(spec)
        for resource in self.client.cluster_resources():
            if resource.vmid != vmid:
                continue
            if resource.is_container:
                return ProviderStatus.PRESENT
            return ProviderStatus.CONFLICT
        return ProviderStatus.ABSENT

    def validate_spec(self, spec: TfVars) -> bool:
        """Validate the variable file for provisioning."""
        if not spec.root_password and not self.config.ssh_public_keys:
            logger.warning("No root password and no SSH keys configured for the container")
        return True

    def build_create_params(self, spec: TfVars, vmid: int) -> Dict[str, Any]:
        """Parameters for POST /nodes/{node}/lxc."""
        net0 = f"name=eth0,bridge={self.config.bridge},ip="
        if spec.is_static:
            net0 += f"{spec.ip_prefix}.{vmid}/{spec.cidr_suffix},gw={spec.gateway}"
        else:
            net0 += "dhcp"

        params: Dict[str, Any] = {
            "vmid": vmid,
            "hostname": spec.hostname,
            "ostemplate": spec.ostemplate,
            "rootfs": f"{spec.rootfs_storage}:{self.config.disk_size}",
            "net0": net0,
            "cores": self.config.cores,
            "memory": self.config.memory,
            "swap": self.config.swap,
            "unprivileged": int(self.config.unprivileged),
            "start": int(self.config.start_on_create),
        }
        if spec.root_password:
            params["password"] = spec.root_password
        if self.config.nesting:
            params["features"] = "nesting=1"
        if self.config.ssh_public_keys:
            params["ssh-public-keys"] = self.config.ssh_public_keys
        return params

    def build_bootstrap_cmd(self, spec: TfVars, vmid: int) -> List[str]:
        """SSH to the Proxmox host and install openssh-server inside the container."""
        remote = f"sudo pct exec {vmid} -- bash -c {shlex.quote(BOOTSTRAP_SCRIPT)}"
        return [
            "ssh",
            "-o", "BatchMode=yes",
            f"{self.config.ssh_user}@{spec.proxmox_host_ip}",
            remote,
        ]

    def build_ansible_cmd(self, address: str) -> List[str]:
        return [
            "ansible-playbook",
            "-i", f"{address},",
            "-u", self.config.ansible_user,
            *self.config.ansible_args,
            self.config.playbook,
        ]

    def plan(self, spec: TfVars) -> ProvisionPlan:
        """Work out the run without changing anything."""
        self.validate_spec(spec)
        vmid = self.resolve_vmid(spec)

        status = self.status(spec, vmid)
        if status == ProviderStatus.CONFLICT:
            raise ProvisionError(f"ID {vmid} is already used by a resource that is not a container")

        plan = ProvisionPlan(
            vmid=vmid,
            create_params=self.build_create_params(spec, vmid),
            bootstrap_cmd=self.build_bootstrap_cmd(spec, vmid),
            create=status == ProviderStatus.ABSENT,
        )
        if spec.is_static:
            plan.ansible_cmd = self.build_ansible_cmd(f"{spec.ip_prefix}.{vmid}")
        return plan

    def container_address(self, node: str, vmid: int) -> str:
        """Address reported by Proxmox for eth0, without the mask."""
        config = self.client.container_config(node, vmid)
        net = parse_net_config(config.get("net0", ""))
        ip = net.get("ip")
        if ip and ip != "dhcp":
            return strip_mask(ip)

        for iface in self.client.container_interfaces(node, vmid):
            if iface.get("name") != "eth0":
                continue
            for addr in (iface.get("inet") or "").split():
                if addr and not addr.startswith("127."):
                    return strip_mask(addr)

        raise ProxmoxResponseError(f"Container {vmid} reports no IPv4 address on eth0", repr(config))

    def present(self, spec: TfVars) -> ProvisionPlan:
        """Create the container if needed, then bootstrap and configure it."""
        plan = self.plan(spec)
        node = spec.target_node

        if plan.create:
            logger.info(f"Creating container {plan.vmid} ({spec.hostname}) on node {node}")
            upid = self.client.create_container(node, plan.create_params)
            self.client.wait_for_task(
                node,
                upid,
                timeout=self.config.task_timeout,
                interval=self.config.task_poll_interval,
            )
            logger.info(f"Container {plan.vmid} created")
        else:
            logger.info(f"Container {plan.vmid} already exists, skipping creation")

        # Fixed wait for the container network to come up
        if self.config.settle_seconds:
            logger.info(f"Waiting {self.config.settle_seconds}s for container network")
            time.sleep(self.config.settle_seconds)

        address = self.container_address(node, plan.vmid)
        plan.ansible_cmd = self.build_ansible_cmd(address)

        self._run_step("Bootstrapping SSH server", plan.bootstrap_cmd)

        env = dict(os.environ, ANSIBLE_HOST_KEY_CHECKING="False")
        self._run_step(f"Running Ansible against {address}", plan.ansible_cmd, env=env)
        return plan

    def _run_step(self, description: str, cmd: List[str], env: Optional[Dict[str, str]] = None) -> None:
        logger.info(description)
        try:
            run_command(cmd, capture_output=False, env=env)
        except subprocess.CalledProcessError as e:
            raise ProvisionError(f"{description} failed with exit code {e.returncode}", e.returncode) from e
        except FileNotFoundError as e:
            raise ProvisionError(f"{description} failed: {cmd[0]} not found", 127) from e
