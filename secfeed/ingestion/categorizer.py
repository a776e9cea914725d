"""
Category Classifier
===================

Keyword-based topical labelling of feed items. Rules are checked in table
order and the first rule with any keyword hit wins.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class CategoryRule:
    """A label and the keywords that select it."""

    label: str
    keywords: Tuple[str, ...]


DEFAULT_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(
        "হ্যাকিং",  # hacking
        ("hack", "hacking", "hacker", "হ্যাক", "হ্যাকিং", "হ্যাকার"),
    ),
    CategoryRule(
        "ম্যালওয়্যার",  # malware
        ("malware", "virus", "trojan", "ম্যালওয়্যার", "ভাইরাস"),
    ),
    CategoryRule(
        "ফিশিং",  # phishing
        ("phishing", "scam", "fraud", "ফিশিং", "প্রতারণা"),
    ),
    CategoryRule(
        "র‍্যানসমওয়্যার",  # ransomware
        ("ransomware", "ransom", "র‍্যানসমওয়্যার", "মুক্তিপণ"),
    ),
    CategoryRule(
        "সাইবার আক্রমণ",  # cyber attack
        ("cyber attack", "cyberattack", "breach", "সাইবার আক্রমণ", "আক্রমণ"),
    ),
    CategoryRule(
        "ডেটা ব্রিচ",  # data breach
        ("data breach", "leak", "ডেটা ব্রিচ", "তথ্য ফাঁস"),
    ),
)


class CategoryClassifier:
    """First-match keyword classifier."""

    def __init__(self, rules: Sequence[CategoryRule] = DEFAULT_RULES):
        self.rules = tuple(
            CategoryRule(rule.label, tuple(k.lower() for k in rule.keywords))
            for rule in rules
        )

    def classify(self, title: Optional[str], content: Optional[str]) -> Optional[str]:
        """Return the label of the first matching rule, or None.

        Args:
            title: Item title (markup allowed)
            content: Item body (markup allowed)
        """
        search_text = f"{title or ''} {content or ''}".lower()

        for rule in self.rules:
            if any(keyword in search_text for keyword in rule.keywords):
                return rule.label

        return None


def classify(title: Optional[str], content: Optional[str]) -> Optional[str]:
    """Quick function to classify with the default rules."""
    return CategoryClassifier().classify(title, content)
