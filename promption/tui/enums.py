from enum import Enum

from promption.models import AgentMode, ItemKind


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


ITEM_KIND_STYLE = {
    ItemKind.SKILL.value: UIStyle.CYAN.value,
    ItemKind.RULE.value: UIStyle.MAGENTA.value,
    ItemKind.WORKFLOW.value: UIStyle.GREEN.value,
}

AGENT_MODE_STYLE = {
    AgentMode.PRIMARY: UIStyle.BLUE.value,
    AgentMode.SUBAGENT: UIStyle.CYAN.value,
}
