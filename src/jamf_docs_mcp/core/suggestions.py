"""Suggestions shown when a documentation search returns nothing."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from jamf_docs_mcp.core.catalog import JAMF_TOPICS

MAX_ALTERNATIVES = 5
MAX_SUGGESTED_TOPICS = 3
SIMPLIFIED_KEYWORDS = 3

KEYWORD_SYNONYMS: Dict[str, List[str]] = {
    "sso": ["single sign-on", "authentication", "identity", "login"],
    "login": ["sign-in", "authentication", "sso", "connect"],
    "mdm": ["mobile device management", "device management", "enrollment"],
    "deploy": ["deployment", "install", "distribute", "push"],
    "config": ["configuration", "settings", "setup", "configure"],
    "policy": ["policies", "rule", "rules", "enforcement"],
    "profile": ["profiles", "configuration profile", "payload"],
    "app": ["application", "apps", "software"],
    "update": ["upgrade", "patch", "software update"],
    "security": ["protection", "secure", "compliance"],
    "user": ["users", "account", "accounts", "identity"],
    "group": ["groups", "smart group", "static group"],
    "script": ["scripts", "bash", "shell", "automation"],
    "api": ["rest api", "classic api", "jamf pro api"],
    "certificate": ["certificates", "cert", "ssl", "tls"],
    "network": ["wifi", "vpn", "networking", "proxy"],
    "filevault": ["encryption", "disk encryption", "recovery key"],
    "inventory": ["hardware", "software", "collection", "attributes"],
    "remote": ["remote management", "vnc", "screen sharing"],
    "protect": ["protection", "threat", "malware", "security"],
}

STOP_WORDS = frozenset(
    """
    the a an is are was were be been being have has had do does did will would could
    should may might must shall can need to of in for on with at by from as into through
    during before after above below between under and or but if then else when up down out
    how what where why who which this that these those it its my your our their i you we
    they me him her us them jamf
    """.split()
)

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_SPACES = re.compile(r"\s+")


@dataclass
class SuggestedTopic:
    id: str
    name: str


@dataclass
class SearchSuggestions:
    simplified_query: Optional[str] = None
    alternative_keywords: List[str] = field(default_factory=list)
    suggested_topics: List[SuggestedTopic] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)


def extract_keywords(query: str) -> List[str]:
    """Lowercased query words longer than one character, minus stop words."""
    words = _SPACES.split(_NON_WORD.sub(" ", query.lower()))
    return [w for w in words if len(w) > 1 and w not in STOP_WORDS]


def simplify_query(query: str) -> Optional[str]:
    """First three keywords, or None when the query already has two or fewer."""
    keywords = extract_keywords(query)
    if len(keywords) <= 2:
        return None
    return " ".join(keywords[:SIMPLIFIED_KEYWORDS])


def find_alternative_keywords(query: str) -> List[str]:
    keywords = extract_keywords(query)
    alternatives: List[str] = []

    def add(term: str) -> None:
        if term not in alternatives:
            alternatives.append(term)

    for keyword in keywords:
        for synonym in KEYWORD_SYNONYMS.get(keyword, []):
            add(synonym)
        for key, synonyms in KEYWORD_SYNONYMS.items():
            if keyword in synonyms:
                add(key)

    return [term for term in alternatives if term not in keywords][:MAX_ALTERNATIVES]


def find_relevant_topics(query: str) -> List[SuggestedTopic]:
    """Top topics by score: +3 per keyword in the topic name, +1 per keyword overlap."""
    keywords = extract_keywords(query)
    scored = []
    for topic_id, topic in JAMF_TOPICS.items():
        name = topic.name.lower()
        score = sum(3 for keyword in keywords if keyword in name)
        for topic_keyword in topic.keywords:
            lowered = topic_keyword.lower()
            score += sum(1 for keyword in keywords if keyword in lowered or lowered in keyword)
        if score > 0:
            scored.append((score, SuggestedTopic(id=topic_id, name=topic.name)))

    scored.sort(key=lambda item: -item[0])
    return [topic for _, topic in scored[:MAX_SUGGESTED_TOPICS]]


def generate_tips(query: str, has_filters: bool) -> List[str]:
    tips = []
    if len(extract_keywords(query)) > 4:
        tips.append("Try using fewer, more specific keywords")
    if has_filters:
        tips.append("Try removing filters to broaden your search")
    if '"' in query:
        tips.append("Try removing quotes for a broader search")
    tips.append("Browse the table of contents with `jamf_docs_get_toc`")
    return tips


def generate_search_suggestions(
    query: str, has_product_filter: bool = False, has_topic_filter: bool = False
) -> SearchSuggestions:
    return SearchSuggestions(
        simplified_query=simplify_query(query),
        alternative_keywords=find_alternative_keywords(query),
        suggested_topics=find_relevant_topics(query),
        tips=generate_tips(query, has_product_filter or has_topic_filter),
    )


def format_search_suggestions(query: str, suggestions: SearchSuggestions) -> str:
    output = f'No results found for "{query}"\n\n## Search Suggestions\n\n'

    if suggestions.simplified_query is not None:
        output += f"**Try simpler query**: `{suggestions.simplified_query}`\n\n"

    if suggestions.alternative_keywords:
        listed = ", ".join(f"`{k}`" for k in suggestions.alternative_keywords)
        output += f"**Alternative keywords**: {listed}\n\n"

    if suggestions.suggested_topics:
        output += "**Try filtering by topic**:\n"
        for topic in suggestions.suggested_topics:
            output += f'- `topic="{topic.id}"` - {topic.name}\n'
        output += "\n"

    if suggestions.tips:
        output += "**Tips**:\n"
        for tip in suggestions.tips:
            output += f"- {tip}\n"

    return output
