import re
import unicodedata
from pathlib import Path
from typing import Union

from tsdoc.models import Visibility

SOURCE_SUFFIX_RE = re.compile(r"\.(ts|tsx|js|jsx)$")


def is_restricted(name: str, visibility: Visibility) -> bool:
    """
    Return True if a declaration or member is hidden from the public variant:
    it carries a private/protected modifier, or its name starts with ``_``.
    """
    return visibility is not Visibility.PUBLIC or name.startswith("_")


# Root collation order of the ASCII punctuation and symbols; anything else in
# those categories sorts after them, currency after that.
_SYMBOL_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~"


def _primary(ch: str) -> tuple:
    if ch.isspace():
        return 0, 0, ch
    if ch.isalpha():
        return 4, 0, ch.casefold()
    if ch.isdigit():
        return 3, unicodedata.digit(ch, 0), ch
    if unicodedata.category(ch) == "Sc":
        return 2, 0, ch
    index = _SYMBOL_ORDER.find(ch)
    return 1, index if index >= 0 else len(_SYMBOL_ORDER), ch


def locale_key(name: str) -> tuple:
    """
    Sort key emulating the root locale collation without depending on the
    process locale.

    Characters compare on their base letter first (whitespace < punctuation
    < symbols < currency < digits < letters, case-insensitive), then on
    accents, then lowercase before uppercase. The name itself breaks
    remaining ties.
    """
    primary = []
    accents = []
    cases = []
    for ch in unicodedata.normalize("NFD", name):
        if unicodedata.combining(ch) and primary:
            accents[-1] += ch
            continue
        primary.append(_primary(ch))
        accents.append("")
        cases.append(ch.isupper())
    return tuple(primary), tuple(accents), tuple(cases), name


def derive_module_name(file_path: Union[str, Path], sources_root: str = "src") -> str:
    """
    Derive a dotted module name from a file path.

    /home/user/project/src/db/client.ts -> db.client
    /home/user/project/src/index.ts     -> "" (index of the sources root)
    /home/user/auth.ts                  -> auth
    """
    parts = list(Path(file_path).parts)
    if sources_root in parts:
        root_index = len(parts) - 1 - parts[::-1].index(sources_root)
        after = parts[root_index + 1 :]
        if not after:
            return ""
        after[-1] = SOURCE_SUFFIX_RE.sub("", after[-1])
        if after[-1] == "index":
            after.pop()
        return ".".join(p for p in after if p)

    return SOURCE_SUFFIX_RE.sub("", parts[-1]) if parts else ""
