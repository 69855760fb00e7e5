import pytest

from tsdoc.parsers import unescape_js


@pytest.mark.parametrize(
    "text, expected",
    [
        (r"a\'b", "a'b"),
        (r"say \"hi\"", 'say "hi"'),
        (r"tab\there", "tab\there"),
        (r"\u00e9\x41", "\u00e9A"),
        (r"\u{1F600}", "\U0001F600"),
        (r"\ud83d\ude00", "\U0001F600"),
        ("line\\\ncontinued", "linecontinued"),
        (r"back\\slash", "back\\slash"),
        (r"\0", "\0"),
    ],
)
def test_unescape_js(text, expected):
    assert unescape_js(text) == expected
