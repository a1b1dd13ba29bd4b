from typing import Final


APP_DIRNAME: Final[str] = "com.abdssamie.promption"
DATABASE_FILENAME: Final[str] = "promption.db"
DATABASE_ENV_VAR: Final[str] = "PROMPTION_DB"

UNNAMED_SLUG: Final[str] = "unnamed"
AGENT_NAME_MAX_LENGTH: Final[int] = 255

OPENCODE_CONFIG_FILENAME: Final[str] = "opencode.json"
OPENCODE_SCHEMA_URL: Final[str] = "https://opencode.ai/config.json"
OPENCODE_PROMPTS_DIR: Final[str] = ".opencode/prompts"

COPILOT_INSTRUCTIONS_PATH: Final[str] = ".github/copilot-instructions.md"
