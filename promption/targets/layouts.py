"""Directory-layout targets: one file per item."""

from promption.models import ItemKind, ProjectionTarget
from promption.targets.base import KindRoute, LayoutTargetAdapter, Wrapping


class AntigravityTargetAdapter(LayoutTargetAdapter):
    TARGET = ProjectionTarget.ANTIGRAVITY
    DIRECTORIES = (".agent/skills", ".agent/rules", ".agent/workflows")
    ROUTES = {
        ItemKind.SKILL: KindRoute(".agent/skills/{slug}/SKILL.md"),
        ItemKind.RULE: KindRoute(".agent/rules/{slug}.md"),
        ItemKind.WORKFLOW: KindRoute(".agent/workflows/{slug}.md"),
    }


class CursorTargetAdapter(LayoutTargetAdapter):
    """Rules become .mdc files; skills and workflows are plain context docs."""

    TARGET = ProjectionTarget.CURSOR
    DIRECTORIES = (".cursor/rules",)
    ROUTES = {
        ItemKind.SKILL: KindRoute(".cursor/rules/{slug}.md"),
        ItemKind.RULE: KindRoute(".cursor/rules/{slug}.mdc", Wrapping.RULE_HEADER),
        ItemKind.WORKFLOW: KindRoute(".cursor/rules/{slug}.md"),
    }


class WindsurfTargetAdapter(LayoutTargetAdapter):
    TARGET = ProjectionTarget.WINDSURF
    DIRECTORIES = (".windsurf/rules", ".windsurf/skills")
    ROUTES = {
        ItemKind.SKILL: KindRoute(
            ".windsurf/skills/{slug}/SKILL.md", Wrapping.SKILL_HEADER
        ),
        ItemKind.RULE: KindRoute(".windsurf/rules/{slug}.md"),
        ItemKind.WORKFLOW: KindRoute(".windsurf/rules/{slug}.md"),
    }


class OpenCodeTargetAdapter(LayoutTargetAdapter):
    TARGET = ProjectionTarget.OPENCODE
    DIRECTORIES = (".opencode/rules", ".opencode/skills")
    ROUTES = {
        ItemKind.SKILL: KindRoute(
            ".opencode/skills/{slug}/SKILL.md", Wrapping.SKILL_HEADER
        ),
        ItemKind.RULE: KindRoute(".opencode/rules/{slug}.md"),
        ItemKind.WORKFLOW: KindRoute(".opencode/rules/{slug}.md"),
    }


class ClineTargetAdapter(LayoutTargetAdapter):
    TARGET = ProjectionTarget.CLINE
    DIRECTORIES = (".clinerules", ".cline/skills")
    ROUTES = {
        ItemKind.SKILL: KindRoute(".cline/skills/{slug}/SKILL.md", Wrapping.SKILL_HEADER),
        ItemKind.RULE: KindRoute(".clinerules/{slug}.md"),
        ItemKind.WORKFLOW: KindRoute(".clinerules/{slug}.md"),
    }
