"""
Install agent skills shipped with a project into Claude's skill directory.

Each subdirectory of ``.agents/skills/`` is one skill. Its files (not
nested directories) are copied to ``~/.claude/skills/<skill>/``.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from .errors import SkillsError

logger = logging.getLogger(__name__)

SKILLS_SOURCE = Path(".agents") / "skills"
SKILLS_TARGET = Path(".claude") / "skills"


def init_skills(source_dir: Optional[Path] = None, target_dir: Optional[Path] = None) -> list[str]:
    """
    Copy skills from source_dir into target_dir.

    A skill that cannot be copied is logged and skipped; the rest still
    install.

    Args:
        source_dir: Defaults to ./.agents/skills
        target_dir: Defaults to ~/.claude/skills

    Returns:
        Names of the skills copied

    Raises:
        SkillsError: If source_dir is missing, target_dir cannot be
            created, or no skill was copied
    """
    source_dir = source_dir or Path.cwd() / SKILLS_SOURCE
    target_dir = target_dir or Path.home() / SKILLS_TARGET

    if not source_dir.is_dir():
        raise SkillsError(f"No {SKILLS_SOURCE} directory found in current directory")

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SkillsError(f"Could not create {target_dir}: {e}") from e

    copied = []
    for skill in sorted(p for p in source_dir.iterdir() if p.is_dir()):
        dest = target_dir / skill.name
        try:
            dest.mkdir(parents=True, exist_ok=True)
            for f in skill.iterdir():
                if f.is_file():
                    shutil.copyfile(f, dest / f.name)
        except OSError as e:
            logger.warning("Could not copy skill '%s': %s", skill.name, e)
            continue
        copied.append(skill.name)

    if not copied:
        raise SkillsError("No skills found to copy")
    return copied
