from promption.tui.renderers import PromptionConsoleUI

__all__ = ["PromptionConsoleUI"]
