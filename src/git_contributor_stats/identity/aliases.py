"""User-supplied alias rules that force identities together.

Three configuration shapes are accepted and parsed into one ``AliasRules``
structure before any lookup happens:

    {"alice": "alice@corp.com", "/^ci-.*/i": "bots"}          # flat map
    {"map": {...}, "groups": [[...]], "canonical": {...}}      # sectioned
    [["ali", "alice@corp.com", "/^A\\.? ?Smith$/"]]            # bare groups

Strings written as ``/pattern/flags`` are compiled once, at build time, and
matched against the raw author name and email. Invalid patterns are dropped.

Example:
    >>> resolution = build_alias_resolver({"groups": [["ali", "alice@corp.com"]]})
    >>> resolution.resolve("ali", "Ali", "")
    'alice'
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..logging_config import get_logger
from .normalizer import normalize_name

logger = get_logger(__name__)

AliasConfig = Union[Mapping[str, Any], Sequence[Any], None]

_SECTION_KEYS = frozenset({"map", "groups", "canonical"})

# JavaScript-style flags; g/y/u/d have no meaning for a single boolean test.
_FLAG_MAP = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
_IGNORED_FLAGS = frozenset("gyud")


@dataclass(frozen=True)
class CanonicalDetails:
    """Display overrides for a canonical identity."""

    name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class AliasPattern:
    regex: re.Pattern
    canonical: str


@dataclass
class AliasRules:
    """Normalized form of every accepted alias configuration shape."""

    exact: dict[str, str] = field(default_factory=dict)
    patterns: list[AliasPattern] = field(default_factory=list)
    canonical_details: dict[str, CanonicalDetails] = field(default_factory=dict)


class AliasResolver:
    """Maps a normalized key (plus raw name/email) to its canonical key."""

    def __init__(self, rules: AliasRules):
        self.rules = rules

    def __call__(self, key: str, name: Optional[str] = None, email: Optional[str] = None) -> str:
        mapped = self.rules.exact.get(key)
        if mapped:
            return mapped

        raw_name = name or ""
        raw_email = email or ""
        for pattern in self.rules.patterns:
            if pattern.regex.search(raw_name) or pattern.regex.search(raw_email):
                return pattern.canonical
        return key


@dataclass
class AliasResolution:
    """Result of building aliases: ``resolve`` is None when there is no config."""

    resolve: Optional[AliasResolver] = None
    canonical_details: dict[str, CanonicalDetails] = field(default_factory=dict)


def compile_alias_pattern(text: Any) -> Optional[re.Pattern]:
    """Compile a ``/pattern/flags`` string, or return None.

    Returns None both for strings that are not in slash form and for slash
    forms that fail to compile or carry unknown flags.
    """
    if not is_pattern_literal(text):
        return None
    last_slash = text.rindex("/")
    source = text[1:last_slash]
    flags = 0
    for flag in text[last_slash + 1 :]:
        if flag in _FLAG_MAP:
            flags |= _FLAG_MAP[flag]
        elif flag not in _IGNORED_FLAGS:
            logger.debug(f"Discarding alias pattern {text!r}: unsupported flag {flag!r}")
            return None
    try:
        return re.compile(source, flags)
    except re.error as e:
        logger.debug(f"Discarding alias pattern {text!r}: {e}")
        return None


def is_pattern_literal(text: Any) -> bool:
    return isinstance(text, str) and text.startswith("/") and text.rfind("/") > 0


def parse_alias_config(config: AliasConfig) -> Optional[AliasRules]:
    """Normalize any accepted configuration shape into ``AliasRules``.

    Returns None when the configuration is falsy or of an unusable type.
    """
    if not config:
        return None

    map_entries: list[tuple[str, str]] = []
    groups: list[Any] = []
    rules = AliasRules()

    if isinstance(config, Mapping):
        if isinstance(config.get("groups"), (list, tuple)):
            groups = list(config["groups"])
        if isinstance(config.get("map"), Mapping):
            map_entries = _string_entries(config["map"].items())
        if not map_entries:
            map_entries = _string_entries(
                (k, v) for k, v in config.items() if k not in _SECTION_KEYS
            )
        if isinstance(config.get("canonical"), Mapping):
            rules.canonical_details = _parse_canonical(config["canonical"])
    elif isinstance(config, (list, tuple)):
        groups = list(config)
    else:
        logger.warning(f"Ignoring alias configuration of type {type(config).__name__}")
        return None

    for alias, canonical in map_entries:
        canonical_key = normalize_name(canonical)
        if is_pattern_literal(alias):
            regex = compile_alias_pattern(alias)
            if regex is not None:
                rules.patterns.append(AliasPattern(regex, canonical_key))
        else:
            rules.exact[normalize_name(alias)] = canonical_key

    for group in groups:
        _register_group(rules, group)

    return rules


def _string_entries(items: Iterable[tuple[Any, Any]]) -> list[tuple[str, str]]:
    entries = []
    for alias, canonical in items:
        if isinstance(canonical, (Mapping, list, tuple)) or canonical is None:
            continue
        entries.append((str(alias), str(canonical)))
    return entries


def _parse_canonical(section: Mapping[str, Any]) -> dict[str, CanonicalDetails]:
    details = {}
    for canonical, info in section.items():
        info = info if isinstance(info, Mapping) else {}
        name = info.get("name")
        email = info.get("email")
        details[normalize_name(canonical)] = CanonicalDetails(
            name=name if isinstance(name, str) and name else None,
            email=email if isinstance(email, str) and email else None,
        )
    return details


def _register_group(rules: AliasRules, group: Any) -> None:
    if not isinstance(group, (list, tuple)) or not group:
        return
    candidate = next(
        (member for member in group if isinstance(member, str) and "@" in member),
        group[0],
    )
    canonical_key = normalize_name(str(candidate))

    for member in group:
        if not isinstance(member, str):
            continue
        if is_pattern_literal(member):
            regex = compile_alias_pattern(member)
            if regex is not None:
                rules.patterns.append(AliasPattern(regex, canonical_key))
        else:
            rules.exact[normalize_name(member)] = canonical_key


def build_alias_resolver(config: AliasConfig = None) -> AliasResolution:
    """Build the resolver and canonical display overrides for ``config``."""
    rules = parse_alias_config(config)
    if rules is None:
        return AliasResolution()

    logger.debug(
        f"Alias rules: {len(rules.exact)} exact, {len(rules.patterns)} patterns, "
        f"{len(rules.canonical_details)} canonical overrides"
    )
    return AliasResolution(
        resolve=AliasResolver(rules),
        canonical_details=dict(rules.canonical_details),
    )


def load_alias_file(path: Union[str, Path]) -> Optional[AliasConfig]:
    """Read an alias configuration from JSON; None if missing or invalid."""
    alias_path = Path(path)
    if not alias_path.exists():
        logger.warning(f"Alias file not found: {alias_path}")
        return None
    try:
        with open(alias_path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable alias file {alias_path}: {e}")
        return None
