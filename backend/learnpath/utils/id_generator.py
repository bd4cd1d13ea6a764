"""ID generation utilities.

Ids are ``{prefix}_{millis_base36}{random}``. They sort roughly by creation
time and carry the record kind in the prefix, so a bare id in a log line
or a pathway item tells which table it belongs to.
"""

import secrets
import string
import time

ALPHABET = string.digits + string.ascii_lowercase

# Table name -> id prefix
ID_PREFIXES = {
    "users": "user",
    "workspaces": "ws",
    "projects": "proj",
    "folders": "fold",
    "pathways": "path",
    "links": "link",
    "videos": "video",
    "documents": "doc",
}


def generate_id(prefix: str, random_length: int = 8) -> str:
    """Generate an id such as ``path_m1a2b3c4d5e6f7``."""
    if prefix not in ID_PREFIXES.values():
        raise ValueError(f"Unknown id prefix: {prefix}")
    random_part = "".join(secrets.choice(ALPHABET) for _ in range(random_length))
    return f"{prefix}_{to_base36(time.time_ns() // 1_000_000)}{random_part}"


def id_for_table(table_name: str) -> str:
    return generate_id(ID_PREFIXES[table_name])


def to_base36(num: int) -> str:
    digits = []
    while True:
        num, rem = divmod(num, 36)
        digits.append(ALPHABET[rem])
        if not num:
            return "".join(reversed(digits))
