"""Scene Segmenter - turns raw script text into exactly four promo scenes."""

import json
import re
from typing import Any, Optional

from app.models.schemas import SCENE_ROLES, Scene, SceneRole, SegmentationStrategy
from app.utils.text_utils import non_empty_lines, split_into_chunks, strip_code_fence

ROLE_ALIASES = {
    "hook": SceneRole.HOOK,
    "problem": SceneRole.PROBLEM,
    "solution": SceneRole.SOLUTION,
    "cta": SceneRole.CTA,
    "call to action": SceneRole.CTA,
    "call-to-action": SceneRole.CTA,
}

_MARKUP = r"[\s#>*_]*"
HEADING_RE = re.compile(
    r"^" + _MARKUP
    + r"(?:(?:scene|adegan)\s*)?"
    + r"(?:(?P<ordinal>\d{1,2})(?:[.):](?!\d)|\s*[-–—](?=\s))\s*" + _MARKUP + r")?"
    + r"(?:(?P<role>hook|problem|solution|cta|call[\s-]+to[\s-]+action)(?!\w)"
    + r"[*_]*\s*(?:\([^)\n]*\))?[*_]*\s*"
    + r"(?:[:.)]+|[-–—]+(?=\s)|(?=\n)|$)[*_]*)?",
    re.IGNORECASE,
)


def _role_from_label(label: Any) -> Optional[SceneRole]:
    if not isinstance(label, str):
        return None
    return ROLE_ALIASES.get(" ".join(label.strip().lower().split()))


def match_heading(text: str) -> tuple[bool, Optional[SceneRole], str]:
    """
    Match a leading role heading ("Hook:", "**2. Problem**", "3)", "CTA -").

    Returns:
        (is_heading, role, remainder) where role is None for ordinal-only headings
    """
    match = HEADING_RE.match(text)
    if not match or not (match.group("ordinal") or match.group("role")):
        return False, None, text.strip()
    role = _role_from_label(match.group("role")) if match.group("role") else None
    return True, role, text[match.end():].strip()


def parse_json_scenes(raw_text: str) -> Optional[list[dict]]:
    """
    Parse a JSON array of {role, text} objects (or {"scenes": [...]}).

    Entries without a string "text" are skipped. Returns None when the text is
    not such JSON or holds no usable entry.
    """
    text = strip_code_fence(raw_text)
    if not text:
        return None

    data = None
    candidates = [text]
    start, end = text.find("["), text.rfind("]")
    if start > 0 and end > start:
        candidates.append(text[start : end + 1])
    for candidate in candidates:
        try:
            data = json.loads(candidate)
            break
        except json.JSONDecodeError:
            continue

    if isinstance(data, dict):
        data = data.get("scenes")
    if not isinstance(data, list):
        return None

    sections = [
        {"role": _role_from_label(entry.get("role")), "text": entry["text"]}
        for entry in data
        if isinstance(entry, dict) and isinstance(entry.get("text"), str)
    ]
    return sections or None


def split_sections(raw_text: str) -> list[dict]:
    """
    Split text into paragraphs on blank lines and before role-name heading lines.

    Ordinal-only lines ("1.", "2)") never split a paragraph, so a numbered
    list stays inside the scene it belongs to.

    Each section is {"role", "tagged", "text"} with the heading stripped.
    A heading standing alone takes the text of the untagged paragraph after it.
    """
    blocks: list[list[str]] = []
    current: list[str] = []
    for line in (raw_text or "").splitlines():
        if not line.strip():
            if current:
                blocks.append(current)
                current = []
            continue
        if current and match_heading(line)[1] is not None:
            blocks.append(current)
            current = []
        current.append(line)
    if current:
        blocks.append(current)

    sections: list[dict] = []
    for block in blocks:
        tagged, role, remainder = match_heading("\n".join(block))
        previous = sections[-1] if sections else None
        if not tagged and previous and previous["tagged"] and not previous["text"]:
            previous["text"] = remainder
            continue
        sections.append({"role": role, "tagged": tagged, "text": remainder})
    return sections


def parse_heading_scenes(raw_text: str) -> Optional[list[dict]]:
    """Heading-based sections, or None when no paragraph carries a heading."""
    sections = split_sections(raw_text)
    if not any(section["tagged"] for section in sections):
        return None

    by_role: dict[SceneRole, dict] = {}
    for section in sections:
        if section["role"] is not None and section["role"] not in by_role:
            by_role[section["role"]] = section
    if len(by_role) == len(SCENE_ROLES):
        return [by_role[role] for role in SCENE_ROLES]
    return sections


def chunk_scenes(raw_text: str) -> list[dict]:
    """Equal contiguous chunks of the non-empty lines, one per role."""
    groups = split_into_chunks(non_empty_lines(raw_text), len(SCENE_ROLES))
    return [{"role": role, "text": "\n".join(group)} for role, group in zip(SCENE_ROLES, groups)]


class SceneSegmenter:
    """Produces exactly four scenes (Hook, Problem, Solution, CTA) from script text."""

    def __init__(self, logger: Any):
        self.logger = logger

    def segment(self, raw_text: str) -> list[Scene]:
        """Segment raw_text into four scenes."""
        scenes, _ = self.segment_with_strategy(raw_text)
        return scenes

    def segment_with_strategy(self, raw_text: str) -> tuple[list[Scene], SegmentationStrategy]:
        """
        Segment raw_text and report which layer produced the scenes.

        Layers: JSON array → role headings → equal line chunks. Roles are
        assigned by position, so the output is always Hook, Problem,
        Solution, CTA. Extra sections are dropped; a JSON or heading layer
        with fewer than four sections falls back to line chunks.

        Args:
            raw_text: Script text returned by the gateway (may be empty)

        Returns:
            (four scenes, strategy used)
        """
        raw_text = raw_text or ""

        sections = parse_json_scenes(raw_text)
        strategy = SegmentationStrategy.JSON
        if sections is not None and len(sections) < len(SCENE_ROLES):
            self.logger.debug(f"Only {len(sections)} JSON entries found, using line chunks")
            sections = None
        elif sections is None:
            sections = parse_heading_scenes(raw_text)
            strategy = SegmentationStrategy.HEADINGS
            if sections is not None and len(sections) < len(SCENE_ROLES):
                self.logger.debug(f"Only {len(sections)} headed sections found, using line chunks")
                sections = None
        if sections is None:
            sections = chunk_scenes(raw_text)
            strategy = SegmentationStrategy.CHUNKS
            self.logger.info("Script matched no structured shape, split into equal line chunks")

        if len(sections) > len(SCENE_ROLES):
            self.logger.debug(f"Truncating {len(sections)} sections to {len(SCENE_ROLES)}")

        texts = [section["text"] for section in sections[: len(SCENE_ROLES)]]

        for section, role in zip(sections, SCENE_ROLES):
            if section["role"] is not None and section["role"] != role:
                self.logger.debug(f"Section labelled {section['role'].value} placed as {role.value}")

        scenes = [Scene(role=role, text=text) for role, text in zip(SCENE_ROLES, texts)]
        self.logger.debug(f"Segmented script into {len(scenes)} scenes via {strategy.value}")
        return scenes, strategy
