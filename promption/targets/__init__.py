from promption.targets.base import (
    KindRoute,
    LayoutTargetAdapter,
    TargetAdapter,
    Wrapping,
    create_target_adapter,
    list_registered_targets,
)

__all__ = [
    "KindRoute",
    "LayoutTargetAdapter",
    "TargetAdapter",
    "Wrapping",
    "create_target_adapter",
    "list_registered_targets",
]
