"""
Name tokenizing for voter roll names.

Roll names are printed "<family name> <given name> <father/husband name>",
so the first token is the family name. Two policies are in use:

- first_token: family name, used for religion/community inference and
  family clustering.
- last_token: token after the final space, used for the village-level
  surname frequency report.

Both return "" for empty input; callers skip those voters.
"""
import re

_LAST_TOKEN_RE = re.compile(r"^.* (\S+)$")


def first_token(full_name: str | None) -> str:
    if not full_name or not isinstance(full_name, str):
        return ""
    parts = full_name.split()
    return parts[0] if parts else ""


def last_token(full_name: str | None) -> str:
    if not full_name or not isinstance(full_name, str):
        return ""
    cleaned = full_name.strip()
    match = _LAST_TOKEN_RE.match(cleaned)
    if match:
        return match.group(1)
    # single token
    return cleaned
