"""Directory tree and documentation steps.

CONTRACT
- Inputs: Context (base dir, category lists, host facts)
- Outputs (required):
  - <base>/repos/<category>/, <base>/docs, <base>/scripts, <base>/patterns/<category>/
  - SYSTEM_README.md, SYSTEM_GUIDE.md, DEPENDENCY_GUIDE.md, repos/REPOSITORY_INDEX.md
- Invariants:
  - Directory creation is idempotent (exist_ok)
  - A document that already exists is left untouched unless refresh_docs is set
  - Documents are rendered from bundled templates, never assembled inline
- Failure:
  - OSError on permission problems; KeyError if a template names an unknown fact
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..context import Context
from ..util.paths import ensure_dir, render_template


def directory_tree(ctx: Context) -> list[Path]:
    base = ctx.base_dir
    cfg = ctx.config
    dirs = [base / "repos" / c for c in cfg.repo_categories]
    dirs += [base / "docs", base / "scripts"]
    dirs += [base / "patterns" / c for c in cfg.pattern_categories]
    return dirs


def repo_tree(categories: list[str]) -> str:
    lines = ["repos/"]
    for i, c in enumerate(categories):
        branch = "└──" if i == len(categories) - 1 else "├──"
        lines.append(f"{branch} {c}/")
    return "\n".join(lines)


def document_values(ctx: Context) -> dict[str, str]:
    values = ctx.facts().template_values()
    values["base_dir"] = str(ctx.base_dir)
    values["repo_tree"] = repo_tree(ctx.config.repo_categories)
    values["pattern_list"] = ", ".join(ctx.config.pattern_categories)
    return values


@dataclass
class DirectoryTreeStep:
    name: str = "directories"
    requires: tuple[str, ...] = ()

    def check(self, ctx: Context) -> bool:
        return all(d.is_dir() for d in directory_tree(ctx))

    def apply(self, ctx: Context) -> str:
        created = 0
        for d in directory_tree(ctx):
            if not d.is_dir():
                ensure_dir(d)
                created += 1
        return f"created {created} directories under {ctx.base_dir}"


@dataclass
class DocumentStep:
    name: str
    template: str
    relpath: str
    requires: tuple[str, ...] = ()

    def target(self, ctx: Context) -> Path:
        return ctx.base_dir / self.relpath

    def check(self, ctx: Context) -> bool:
        if ctx.config.refresh_docs:
            return False
        return self.target(ctx).is_file()

    def apply(self, ctx: Context) -> str:
        text = render_template(self.template, document_values(ctx))
        dest = self.target(ctx)
        ensure_dir(dest.parent)
        dest.write_text(text, encoding="utf-8")
        return f"wrote {dest}"


DOCUMENTS = [
    ("system-readme", "system_readme.md", "SYSTEM_README.md"),
    ("system-guide", "system_guide.md", "SYSTEM_GUIDE.md"),
    ("dependency-guide", "dependency_guide.md", "DEPENDENCY_GUIDE.md"),
    ("repository-index", "repository_index.md", "repos/REPOSITORY_INDEX.md"),
]


def document_steps() -> list[DocumentStep]:
    return [DocumentStep(name=n, template=t, relpath=r) for n, t, r in DOCUMENTS]
