import json
import random
from types import SimpleNamespace

import pytest

from glossary_backend.app.services import settings_service
from glossary_backend.app.services.settings_service import (
    DEFAULT_LOADING_PHRASES, parse_loading_phrases, pick_loading_phrase, site_display
)


def test_parse_valid_phrases():
    assert parse_loading_phrases('["Sa da tay!", "Wa da tah!"]') == ["Sa da tay!", "Wa da tah!"]


@pytest.mark.parametrize("value", [None, "", "not json", "{\"a\": 1}", "42", "[]", '["", "  "]'])
def test_parse_falls_back_to_defaults(value):
    assert parse_loading_phrases(value) == DEFAULT_LOADING_PHRASES


def test_parse_returns_a_copy_of_defaults():
    phrases = parse_loading_phrases(None)
    phrases.append("changed")
    assert "changed" not in DEFAULT_LOADING_PHRASES


def test_pick_loading_phrase_uses_given_list():
    rng = random.Random(1)
    assert pick_loading_phrase(["only one"], rng) == "only one"


def test_site_display_defaults_when_unset():
    display = site_display([])
    assert display["title"] == settings_service.DEFAULT_SITE_TITLE
    assert display["description"] == settings_service.DEFAULT_SITE_DESCRIPTION
    assert display["gif_url"] is None
    assert display["loading_phrase"] in DEFAULT_LOADING_PHRASES


def test_site_display_uses_stored_values():
    settings = [
        SimpleNamespace(key="siteTitle", value="My Glossary"),
        SimpleNamespace(key="siteDescription", value="Words and more"),
        SimpleNamespace(key="gifUrl", value="https://example.com/a.gif"),
        SimpleNamespace(key="loadingPhrases", value=json.dumps(["Hold on"])),
    ]
    display = site_display(settings)
    assert display["title"] == "My Glossary"
    assert display["description"] == "Words and more"
    assert display["gif_url"] == "https://example.com/a.gif"
    assert display["loading_phrases"] == ["Hold on"]
    assert display["loading_phrase"] == "Hold on"
