_LOADED = False


def load_target_modules() -> None:
    global _LOADED
    if _LOADED:
        return

    from promption.targets import copilot as _copilot  # noqa: F401
    from promption.targets import layouts as _layouts  # noqa: F401

    _LOADED = True
