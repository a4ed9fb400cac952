import json

import pytest

from redirector.bang import Bang, Category, load_bangs, parse_bang

GH_SHORT = {
    "c": "Tech",
    "d": "github.com",
    "r": 100,
    "s": "GitHub",
    "sc": "Programming",
    "t": "gh",
    "u": "https://github.com/search?q={{{s}}}",
}


def test_parse_short_keys():
    bang = parse_bang(GH_SHORT)
    assert bang.category is Category.TECH
    assert bang.domain == "github.com"
    assert bang.relevance == 100
    assert bang.short_name == "GitHub"
    assert bang.subcategory == "Programming"
    assert bang.trigger == "gh"
    assert bang.url_template == "https://github.com/search?q={{{s}}}"


def test_parse_long_keys():
    bang = parse_bang(
        {
            "category": "News",
            "trigger": "bbc",
            "url_template": "https://news.example.com/search?q={{{s}}}",
            "short_name": "BBC",
        }
    )
    assert bang.category is Category.NEWS
    assert bang.trigger == "bbc"
    assert bang.url_template == "https://news.example.com/search?q={{{s}}}"
    assert bang.short_name == "BBC"


def test_optional_fields_default_to_none_and_unknown_keys_ignored():
    bang = parse_bang({"t": "x", "u": "https://x.example.com/?q=", "extra": 1})
    assert bang == Bang(trigger="x", url_template="https://x.example.com/?q=")
    assert bang.category is None
    assert bang.relevance is None


def test_online_services_name():
    bang = parse_bang({"c": "Online Services", "t": "o", "u": "https://o.example.com/"})
    assert bang.category is Category.ONLINE_SERVICES
    assert bang.to_dict()["c"] == "Online Services"


def test_to_dict_uses_short_keys_in_order():
    bang = parse_bang(GH_SHORT)
    assert list(bang.to_dict()) == ["c", "d", "r", "s", "sc", "t", "u"]
    assert bang.to_dict() == GH_SHORT


def test_round_trip():
    bang = Bang(
        trigger="w",
        url_template="https://wiki.example.com/?q={{{s}}}",
        category=Category.RESEARCH,
        relevance=5,
    )
    assert parse_bang(bang.to_dict()) == bang
    assert load_bangs(json.dumps([bang.to_dict()])) == [bang]


@pytest.mark.parametrize(
    "data",
    [
        {"u": "https://x.example.com/"},
        {"t": "x"},
        {"t": 5, "u": "https://x.example.com/"},
        {"t": "x", "u": "https://x.example.com/", "c": "Sports"},
        {"t": "x", "u": "https://x.example.com/", "r": -1},
        {"t": "x", "u": "https://x.example.com/", "r": True},
        {"t": "x", "trigger": "y", "u": "https://x.example.com/"},
        {"t": "x", "u": "https://x.example.com/", "d": 3},
    ],
)
def test_invalid_entries_raise(data):
    with pytest.raises(ValueError):
        parse_bang(data)


def test_non_mapping_raises():
    with pytest.raises(ValueError):
        parse_bang(["t", "u"])


def test_load_bangs_list():
    bangs = load_bangs(json.dumps([GH_SHORT, {"t": "g", "u": "https://g.example.com/?q="}]))
    assert [b.trigger for b in bangs] == ["gh", "g"]


def test_load_bangs_requires_array():
    with pytest.raises(ValueError):
        load_bangs("{}")


def test_load_bangs_rejects_bad_json():
    with pytest.raises(ValueError):
        load_bangs("[{")