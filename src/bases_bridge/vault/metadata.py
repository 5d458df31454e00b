"""Tag and link extraction for markdown notes."""

import re
from typing import Any, Dict, Set

# Inline #tags: must follow whitespace or line start, may contain nested/segments
TAG_PATTERN = re.compile(r"(?<![\w#&/])#([^\s#!\"$%&'()*+,.:;<=>?@\[\]^`{|}~]+)")
WIKI_LINK_PATTERN = re.compile(r"(?<!!)\[\[([^\]\n]+?)\]\]")
MARKDOWN_LINK_PATTERN = re.compile(r"(?<!!)\[[^\]\n]*\]\(([^)\s]+)\)")
FENCE_PATTERN = re.compile(r"```.*?```", re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]*`")


def _strip_code(body: str) -> str:
    return INLINE_CODE_PATTERN.sub("", FENCE_PATTERN.sub("", body))


def _clean_tag(tag: str) -> str:
    tag = tag.strip()
    return tag[1:] if tag.startswith("#") else tag


def extract_tags(frontmatter: Dict[str, Any], body: str) -> Set[str]:
    """Collect tags from the body and from the `tags` frontmatter key, without leading #."""
    tags: Set[str] = set()

    for match in TAG_PATTERN.finditer(_strip_code(body)):
        tag = match.group(1)
        # Pure numbers are headings/issue refs, not tags
        if tag and not tag.isdigit():
            tags.add(tag)

    fm_tags = frontmatter.get("tags")
    if isinstance(fm_tags, str):
        for item in re.split(r"[, ]+", fm_tags):
            cleaned = _clean_tag(item)
            if cleaned:
                tags.add(cleaned)
    elif isinstance(fm_tags, list):
        for item in fm_tags:
            if isinstance(item, str) and item.strip():
                tags.add(_clean_tag(item))

    return tags


def extract_links(body: str) -> Set[str]:
    """Collect outbound link targets from wiki links and relative markdown links, skipping embeds."""
    links: Set[str] = set()
    text = _strip_code(body)

    for match in WIKI_LINK_PATTERN.finditer(text):
        target = match.group(1).split("|", 1)[0].strip()
        if target:
            links.add(target)

    for match in MARKDOWN_LINK_PATTERN.finditer(text):
        target = match.group(1).strip()
        if "://" in target or target.startswith("mailto:"):
            continue
        if target:
            links.add(target.replace("%20", " "))

    return links
