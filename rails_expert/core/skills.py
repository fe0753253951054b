"""
Skill discovery.

Skills can be:
- Directories with SKILL.md: skills/active-record/SKILL.md
- Single .md files: skills/conventions.md

A skill directory may also hold examples/ (code samples in Ruby, ERB,
JavaScript, shell) and references/ (longer markdown the host pulls in on
demand).
"""

import logging
from pathlib import Path
from typing import Optional

from rails_expert.core.documents import opt_str, try_load_document
from rails_expert.models.skill import SkillExample, SkillInfo

logger = logging.getLogger(__name__)

SKILL_FILENAMES = ("SKILL.md", "skill.md")


def find_skill_file(skill_dir: Path) -> Optional[Path]:
    """Return the definition file of a directory skill, if any."""
    for candidate_name in SKILL_FILENAMES:
        candidate = skill_dir / candidate_name
        if candidate.is_file():
            return candidate
    return None


def discover_skills(plugin_path: Path) -> list[SkillInfo]:
    """Discover all skills in a plugin's skills/ directory."""
    skills_dir = plugin_path / "skills"
    skills: list[SkillInfo] = []

    if not skills_dir.is_dir():
        logger.debug(f"Skills directory does not exist: {skills_dir}")
        return skills

    for item in sorted(skills_dir.iterdir()):
        skill = None

        if item.is_file() and item.suffix == ".md":
            skill = _parse_skill_file(item, item.stem)
        elif item.is_dir():
            skill_file = find_skill_file(item)
            if skill_file:
                skill = _parse_skill_file(skill_file, item.name)
                if skill:
                    skill.examples = _discover_examples(item)
                    skill.references = _discover_references(item)
            else:
                logger.debug(f"Skipping {item}: no SKILL.md")

        if skill:
            skills.append(skill)

    skills.sort(key=lambda s: s.name.lower())

    logger.info(f"Discovered {len(skills)} skills in {skills_dir}")
    return skills


def skill_markdown_files(plugin_path: Path) -> list[Path]:
    """Every markdown file under skills/, including references and examples."""
    skills_dir = plugin_path / "skills"
    if not skills_dir.is_dir():
        return []
    return sorted(skills_dir.rglob("*.md"))


def _parse_skill_file(path: Path, default_name: str) -> Optional[SkillInfo]:
    """Parse a skill file and extract metadata."""
    doc = try_load_document(path)
    if doc is None:
        return None

    metadata = doc.metadata
    return SkillInfo(
        name=str(metadata.get("name") or default_name),
        description=str(metadata.get("description") or ""),
        version=opt_str(metadata.get("version")),
        path=str(path),
    )


def _discover_examples(skill_dir: Path) -> list[SkillExample]:
    examples_dir = skill_dir / "examples"
    if not examples_dir.is_dir():
        return []
    return [
        SkillExample.from_path(p)
        for p in sorted(examples_dir.rglob("*"))
        if p.is_file() and not p.name.startswith(".")
    ]


def _discover_references(skill_dir: Path) -> list[str]:
    references_dir = skill_dir / "references"
    if not references_dir.is_dir():
        return []
    return [str(p.relative_to(skill_dir)) for p in sorted(references_dir.rglob("*.md"))]
