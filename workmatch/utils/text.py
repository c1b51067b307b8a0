"""Text helpers for comparing skill and location labels."""

from typing import Iterable, List, Optional


def fold_label(label: str) -> str:
    """Fold a label to its case-insensitive comparable form.

    Only case is folded. Punctuation and inner whitespace are kept, so
    "Node.js" and "node js" stay different labels.

    Example:
        >>> fold_label("React Native")
        'react native'
    """
    return label.lower()


def contains_either_way(first: str, second: str) -> bool:
    """Check bidirectional substring containment of two folded labels.

    Example:
        >>> contains_either_way("new york", "new york, usa")
        True
        >>> contains_either_way("react", "vue")
        False
    """
    return first in second or second in first


def parse_skill_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated skill string into clean labels.

    Example:
        >>> parse_skill_list(" React, Node.js,, ")
        ['React', 'Node.js']
    """
    if not raw:
        return []
    return clean_labels(raw.split(","))


def clean_labels(labels: Iterable[str]) -> List[str]:
    """Strip labels and drop empty ones, keeping order and case."""
    cleaned = []
    for label in labels:
        stripped = label.strip()
        if stripped:
            cleaned.append(stripped)
    return cleaned
