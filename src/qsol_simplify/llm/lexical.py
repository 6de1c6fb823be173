"""Offline, deterministic rewrite backend.

This is not a language model. It applies plain-language substitutions and
splits long sentences, growing more aggressive with the diversity level:

- level 1: single-word plain-language replacements;
- level 2: + wordy phrase replacements, semicolons/colons become full stops;
- level 3+: + filler adverbs dropped, long clauses split at conjunctions.

It lets the simplifier run without network access or API keys, and gives
tests and demos a realistic, repeatable oracle.
"""

from __future__ import annotations

import re

_WORD_REPLACEMENTS: dict[str, str] = {
    "utilize": "use",
    "utilise": "use",
    "utilization": "use",
    "leverage": "use",
    "facilitate": "help",
    "assist": "help",
    "commence": "start",
    "terminate": "end",
    "endeavor": "try",
    "attempt": "try",
    "obtain": "get",
    "purchase": "buy",
    "require": "need",
    "sufficient": "enough",
    "numerous": "many",
    "therefore": "so",
    "consequently": "so",
    "however": "but",
    "moreover": "also",
    "furthermore": "also",
    "additionally": "also",
    "approximately": "about",
    "demonstrate": "show",
    "indicate": "show",
    "significant": "big",
    "methodology": "method",
    "implementation": "build",
    "implement": "build",
    "individuals": "people",
    "modification": "change",
    "modify": "change",
    "subsequently": "later",
    "objective": "goal",
    "component": "part",
    "components": "parts",
    "comprehend": "understand",
    "determine": "find",
    "regarding": "about",
}

_PHRASE_REPLACEMENTS: dict[str, str] = {
    "in order to": "to",
    "due to the fact that": "because",
    "a large number of": "many",
    "a majority of": "most",
    "at this point in time": "now",
    "in the event that": "if",
    "with regard to": "about",
    "in spite of the fact that": "although",
    "for the purpose of": "for",
    "prior to": "before",
    "subsequent to": "after",
    "e.g.": "for example",
    "i.e.": "that is",
}

_FILLER_RE = re.compile(
    r"\b(?:very|really|quite|rather|somewhat|basically|essentially|actually|"
    r"substantially|significantly|sufficiently)\s+",
    re.IGNORECASE,
)
_CLAUSE_BREAK_RE = re.compile(r",\s+(and|but|so|which|because|while)\s+", re.IGNORECASE)
_LIST_BREAK_RE = re.compile(r"\s*[;:]\s+")
_SPACE_RE = re.compile(r"\s+")
_SENTENCE_START_RE = re.compile(r"(^|[.!?]\s+)([a-z])")

# Connective that opens the new sentence after a clause split.
_CLAUSE_LEADS: dict[str, str] = {
    "and": "",
    "but": "But ",
    "so": "So ",
    "which": "This ",
    "because": "This is because ",
    "while": "Meanwhile, ",
}


def _match_case(source: str, replacement: str) -> str:
    if source[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _replace_all(text: str, table: dict[str, str]) -> str:
    out = text
    for source, target in table.items():
        pattern = re.compile(rf"(?<!\w){re.escape(source)}(?!\w)", re.IGNORECASE)
        out = pattern.sub(lambda m, t=target: _match_case(m.group(0), t), out)
    return out


def _split_clauses(text: str) -> str:
    def _lead(match: re.Match[str]) -> str:
        return ". " + _CLAUSE_LEADS[match.group(1).lower()]

    return _CLAUSE_BREAK_RE.sub(_lead, text)


def _capitalize_sentences(text: str) -> str:
    return _SENTENCE_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), text)


class LexicalRewriteBackend:
    """Rule-based rewrite backend keyed on diversity level."""

    max_level = 3

    def rewrite(self, text: str, diversity_level: int) -> str:
        level = max(1, min(int(diversity_level), self.max_level))

        out = _replace_all(text, _WORD_REPLACEMENTS)
        if level >= 2:
            out = _replace_all(out, _PHRASE_REPLACEMENTS)
            out = _LIST_BREAK_RE.sub(". ", out)
        if level >= 3:
            out = _FILLER_RE.sub("", out)
            out = _split_clauses(out)

        out = _SPACE_RE.sub(" ", out).strip()
        return _capitalize_sentences(out)


__all__ = ["LexicalRewriteBackend"]
