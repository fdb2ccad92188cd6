"""Parse raw `term (hint): definition` lines into cards."""

import logging
import re

from vocabart.cards.model import Card

logger = logging.getLogger(__name__)

DELIMITER = ":"

# "<term> (<hint>)" - lazy term, first parenthesised group wins
HINT_PATTERN = re.compile(r"(.*?)\s*\((.*?)\)")


def parse_line(line: str) -> Card | None:
    """Parse one line. Returns None when the line does not yield a card."""
    if DELIMITER not in line:
        return None

    left, rest = line.split(DELIMITER, 1)
    definition = rest.strip()
    left = left.strip()

    term = left
    custom_prompt = None
    m = HINT_PATTERN.search(left)
    if m:
        term = m.group(1).strip()
        custom_prompt = m.group(2).strip() or None

    if not term or not definition:
        return None

    return Card(term=term, definition=definition, custom_prompt=custom_prompt)


def parse_vocabulary(text: str) -> list[Card]:
    """Parse multi-line vocabulary text into cards, in input order.

    Lines without a `:` or with an empty term or definition are skipped.
    """
    cards = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        card = parse_line(line)
        if card is None:
            if line.strip():
                logger.debug(f"Skipping line {lineno}: {line.strip()[:60]!r}")
            continue
        cards.append(card)

    logger.info(f"Parsed {len(cards)} cards")
    return cards
