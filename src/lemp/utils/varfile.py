"""Reading and writing the terraform.tfvars variable file."""

import logging
from pathlib import Path
from typing import Any, Union

import hcl2
from lark.exceptions import LarkError
from pydantic import ValidationError

from lemp.errors import ConfigError
from lemp.models.tfvars import TfVars
from lemp.utils.templates import render_template


logger = logging.getLogger(__name__)


TFVARS_TEMPLATE = """\
# This file was auto-generated by the lempctl wizard
proxmox_host_ip = {{ v.proxmox_host_ip | hcl }}
target_node     = {{ v.target_node | hcl }}
hostname        = {{ v.hostname | hcl }}
ostemplate      = {{ v.ostemplate | hcl }}
rootfs_storage  = {{ v.rootfs_storage | hcl }}
root_password   = {{ v.root_password | hcl }}
{% if v.is_static %}
# Static IP configuration
container_id    = {{ v.container_id }}
ip_prefix       = {{ v.ip_prefix | hcl }}
cidr_suffix     = {{ v.cidr_suffix | hcl }}
gateway         = {{ v.gateway | hcl }}
# Note: The container address ({{ v.ip_config }}) is ip_prefix.container_id
{% else %}
# Using DHCP - network details will be assigned by the Proxmox DHCP server
container_id    = null
ip_prefix       = null
cidr_suffix     = null
gateway         = null
{% endif %}
"""


def hcl_string(value: Any) -> str:
    """Quote a value as an HCL string literal."""
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("${", "$${")
    )
    return f'"{escaped}"'


def render_tfvars(tfvars: TfVars) -> str:
    """Render the variable file content."""
    return render_template(TFVARS_TEMPLATE, filters={"hcl": hcl_string}, v=tfvars)


def write_tfvars(path: Union[str, Path], tfvars: TfVars) -> str:
    """Write the variable file, replacing any previous content."""
    content = render_tfvars(tfvars)
    Path(path).write_text(content)
    logger.debug(f"Wrote variable file {path}")
    return content



def load_tfvars(path: Union[str, Path]) -> TfVars:
    """Load and validate a variable file."""
    file_path = Path(path)
    if not file_path.exists():
        raise ConfigError(f"Variable file not found: {file_path}")

    try:
        values = hcl2.loads(file_path.read_text())
    except LarkError as e:
        raise ConfigError(f"Cannot parse variable file {file_path}: {e}") from e

    try:
        return TfVars(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid variable file {file_path}: {e}") from e
