import pytest

from hlsplaylist.errors import FloatParseError, IntParseError, MalformedError
from hlsplaylist.m3u8.grammar import (
    parse_attributes,
    parse_float,
    parse_uint,
    scan_tag,
    split_lines,
    strip_marker,
)


def test_split_lines():
    assert split_lines("#EXTM3U\n#EXT-X-VERSION:3\r\nuri\n") == [
        "#EXT-X-VERSION:3",
        "uri",
    ]


def test_split_lines_with_header_only():
    assert split_lines("#EXTM3U\n") == []


@pytest.mark.parametrize("text", ["", "EXTM3U\n", "#EXTM3U", " #EXTM3U\n"])
def test_split_lines_without_header(text):
    with pytest.raises(MalformedError):
        split_lines(text)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("#EXT-X-TWITCH-INFO:NODE=", ("-X-TWITCH-INFO", "NODE=")),
        ("#EXT-X-MEDIA:TYPE=VIDEO", ("-X-MEDIA", "TYPE=VIDEO")),
        ("#EXTINF:2.000,live", ("INF", "2.000,live")),
        ("#EXT-X-PROGRAM-DATE-TIME:2020-11-18T16:42:56.956Z", (
            "-X-PROGRAM-DATE-TIME",
            "2020-11-18T16:42:56.956Z",
        )),
        ("#EXTM3U", ("M3U", "")),
        ("#EXT-X-DISCONTINUITY", ("-X-DISCONTINUITY", "")),
        ("#EXT-XBANDWIDTH=630000", ("-XBANDWIDTH=630000", "")),
        ("#EXT-X-ENDLIST:", ("-X-ENDLIST", "")),
    ],
)
def test_scan_tag(line, expected):
    assert scan_tag(line) == expected


@pytest.mark.parametrize("line", ["", "#EXT", "EXTINF:2.0,", "https://example.org/"])
def test_scan_tag_without_prefix(line):
    with pytest.raises(MalformedError) as excinfo:
        scan_tag(line)

    assert excinfo.value.context == line


@pytest.mark.parametrize(
    "name, expected",
    [("-X-MEDIA", "MEDIA"), ("INF", "INF"), ("-X--X-FOO", "FOO"), ("-XFOO", "-XFOO")],
)
def test_strip_marker(name, expected):
    assert strip_marker(name) == expected


@pytest.mark.parametrize(
    "remainder, expected",
    [
        ("TYPE=VIDEO", {"TYPE": "VIDEO"}),
        ('GROUP-ID="720p60"', {"GROUP-ID": '"720p60"'}),
        ('CODECS="avc1.4D401F,mp4a.40.2"', {"CODECS": '"avc1.4D401F,mp4a.40.2"'}),
        ("", {}),
        ("URI=", {"URI": ""}),
        ('A="",B=1', {"A": '""', "B": "1"}),
        ("A=x=y", {"A": "x=y"}),
    ],
)
def test_parse_attributes(remainder, expected):
    assert parse_attributes(remainder) == expected


def test_parse_attributes_order():
    attributes = parse_attributes(
        'TYPE=VIDEO,GROUP-ID="720p60",NAME="720p60",AUTOSELECT=YES,DEFAULT=YES'
    )

    assert list(attributes.items()) == [
        ("TYPE", "VIDEO"),
        ("GROUP-ID", '"720p60"'),
        ("NAME", '"720p60"'),
        ("AUTOSELECT", "YES"),
        ("DEFAULT", "YES"),
    ]


def test_parse_attributes_with_duplicate_key():
    attributes = parse_attributes("A=1,B=2,A=3")

    assert list(attributes.items()) == [("A", "3"), ("B", "2")]


@pytest.mark.parametrize(
    "remainder", ["3", "A=1,B", "A=1,", "=1", 'A="x"y,B=2', "9016.000"]
)
def test_parse_attributes_when_malformed(remainder):
    with pytest.raises(MalformedError):
        parse_attributes(remainder)


@pytest.mark.parametrize(
    "text, bits, expected",
    [("3", 8, 3), ("+6", 8, 6), ("255", 8, 255), ("4294967295", 32, 4294967295)],
)
def test_parse_uint(text, bits, expected):
    assert parse_uint(text, bits) == expected


@pytest.mark.parametrize(
    "text, bits, message",
    [
        ("", 8, "empty string"),
        ("-1", 8, "invalid digit"),
        (" 3", 8, "invalid digit"),
        ("3.0", 8, "invalid digit"),
        ("256", 8, "too large"),
        ("4294967296", 32, "too large"),
    ],
)
def test_parse_uint_when_invalid(text, bits, message):
    with pytest.raises(IntParseError, match=message):
        parse_uint(text, bits)


@pytest.mark.parametrize(
    "text, expected", [("2.000", 2.0), ("4", 4.0), (".5", 0.5), ("1e1", 10.0)]
)
def test_parse_float(text, expected):
    assert parse_float(text) == expected


@pytest.mark.parametrize("text", ["", "abc", " 2.0", "1_0", "2.0s"])
def test_parse_float_when_invalid(text):
    with pytest.raises(FloatParseError):
        parse_float(text)
