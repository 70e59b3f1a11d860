"""Semantic ordering of dotted version strings ("1.2", "1.10.0", ...).

Versions are compared component-wise as non-negative integers, with missing
trailing components treated as 0. Strings that cannot be parsed sort after
every parseable one, in plain string order among themselves. Numerically
equal strings ("1.0" and "1.0.0") are tie-broken on the raw text so distinct
keys never compare equal. The order is total, so a sorted collection does
not depend on insertion order.
"""


def parse_version(text: str) -> tuple[int, ...] | None:
    """Split ``text`` on '.' into integers, or return None if any part is not a digit run."""
    if not text:
        return None
    components: list[int] = []
    for raw in text.split("."):
        if not raw.isascii() or not raw.isdigit():
            return None
        components.append(int(raw))
    return tuple(components)


def is_valid_version(text: str) -> bool:
    return parse_version(text) is not None


def _strip_trailing_zeros(components: tuple[int, ...]) -> tuple[int, ...]:
    end = len(components)
    while end > 0 and components[end - 1] == 0:
        end -= 1
    return components[:end]


def version_sort_key(text: str) -> tuple:
    """Sort key: parseable versions by value then text, unparseable ones after, by text."""
    parsed = parse_version(text)
    if parsed is None:
        return (1, (), text)
    return (0, _strip_trailing_zeros(parsed), text)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` sorts before, equal to, or after ``b``."""
    key_a, key_b = version_sort_key(a), version_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)
