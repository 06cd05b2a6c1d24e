"""Interactive wizard producing the variable file."""

from lemp.wizard.helpers import HelperRunner
from lemp.wizard.prompts import ConsolePrompter, Prompter, ScriptedPrompter
from lemp.wizard.session import Wizard, host_from_api_url

__all__ = [
    "ConsolePrompter",
    "HelperRunner",
    "Prompter",
    "ScriptedPrompter",
    "Wizard",
    "host_from_api_url",
]
