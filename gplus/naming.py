"""Conversion of struct field names to snake_case column names."""

_COMMON_INITIALISMS = (
    "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML", "HTTPS",
    "HTTP", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS", "RPC", "SLA",
    "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP", "UI", "UID", "UUID",
    "URI", "URL", "UTF8", "VM", "XML", "XMPP", "XSRF", "XSS",
)

# Earlier entries win when several initialisms match at the same position.
_INITIALISM_REPLACEMENTS = tuple(
    (word, word[0] + word[1:].lower()) for word in _COMMON_INITIALISMS
)


def _replace_initialisms(name: str) -> str:
    """Rewrite known initialisms in title case, e.g. ``UserID`` -> ``UserId``."""
    out = []
    pos = 0
    while pos < len(name):
        for old, new in _INITIALISM_REPLACEMENTS:
            if name.startswith(old, pos):
                out.append(new)
                pos += len(old)
                break
        else:
            out.append(name[pos])
            pos += 1
    return "".join(out)


def _is_upper(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def to_db_name(name: str) -> str:
    """Convert a CamelCase field name to a snake_case column name."""
    if not name:
        return ""

    value = _replace_initialisms(name)
    parts = []
    last_upper = False
    cur_upper = _is_upper(value[0])

    for i, (ch, nxt) in enumerate(zip(value, value[1:])):
        next_upper = _is_upper(nxt)
        if cur_upper:
            keeps_run = last_upper and (next_upper or _is_digit(nxt))
            if not keeps_run and i > 0 and value[i - 1] != "_" and nxt != "_":
                parts.append("_")
            parts.append(ch.lower())
        else:
            parts.append(ch)
        last_upper, cur_upper = cur_upper, next_upper

    last_char = value[-1]
    if cur_upper:
        if not last_upper and len(value) > 1:
            parts.append("_")
        parts.append(last_char.lower())
    else:
        parts.append(last_char)
    return "".join(parts)


def ns_column_name(name: str) -> str:
    """Default naming strategy for columns without an explicit name."""
    return to_db_name(name)