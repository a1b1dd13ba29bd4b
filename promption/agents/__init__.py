from promption.agents.merger import MergeResult, OpenCodeAgentMerger
from promption.agents.service import AgentService, AgentWriteResult, build_agent_update

__all__ = [
    "AgentService",
    "AgentWriteResult",
    "MergeResult",
    "OpenCodeAgentMerger",
    "build_agent_update",
]
