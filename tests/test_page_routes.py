import json

import pytest

from glossary_backend.app.models import DictionaryEntry
from glossary_api import crud
from conftest import ADMIN_PASSWORD, ADMIN_USERNAME


# -------------------- 公开页面 --------------------
def test_home_lists_entries(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Phrase Dictionary" in resp.text
    assert "Sa da tay" in resp.text
    assert "Capatown" in resp.text


def test_home_search(client):
    resp = client.get("/", params={"q": "tay"})
    assert resp.status_code == 200
    assert 'Showing results for "tay" (1 entry)' in resp.text
    assert "Capatown" not in resp.text


def test_home_search_without_results(client):
    resp = client.get("/", params={"q": "zebra xylophone"})
    assert "No results found for" in resp.text


# -------------------- 登录 --------------------
def test_admin_requires_login(client):
    resp = client.get("/admin", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/login"


def test_admin_login_wrong_password(client):
    resp = client.post("/admin/login", data={"username": ADMIN_USERNAME, "password": "nope"})
    assert resp.status_code == 401
    assert "Invalid credentials" in resp.text


def test_admin_login_missing_fields(client):
    resp = client.post("/admin/login", data={"username": ADMIN_USERNAME})
    assert resp.status_code == 400


def test_admin_dashboard_after_login(admin_client):
    resp = admin_client.get("/admin")
    assert resp.status_code == 200
    assert "Dictionary admin" in resp.text
    assert "Sa da tay" in resp.text
    assert "Site Settings" in resp.text


def test_admin_table_search(admin_client):
    resp = admin_client.get("/admin", params={"q": "tay"})
    assert "Sa da tay" in resp.text
    assert "Capatown" not in resp.text


def test_logout(admin_client):
    admin_client.post("/admin/logout")
    resp = admin_client.get("/admin", follow_redirects=False)
    assert resp.status_code == 303


# -------------------- 词条表单 --------------------
def test_create_entry_from_form(admin_client):
    resp = admin_client.post("/admin/entries", data={
        "phrase": "Sepatown",
        "translation": "Separate now",
        "usage_context": "",
        "pronunciation": "",
        "audio_url": "",
    }, follow_redirects=False)
    assert resp.status_code == 303
    assert "Sepatown" in admin_client.get("/").text


def test_create_entry_form_validation(admin_client, db_session):
    resp = admin_client.post("/admin/entries", data={"phrase": "S", "translation": "Separate now"})
    assert resp.status_code == 400
    assert "must be at least 2 characters" in resp.text
    assert db_session.query(DictionaryEntry).filter(DictionaryEntry.phrase == "S").count() == 0


def test_create_entry_requires_session(client):
    resp = client.post("/admin/entries", data={"phrase": "Sepatown", "translation": "Separate now"},
                       follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin/login"


def test_edit_entry_from_form(admin_client, db_session):
    entry = crud.search_dictionary_entries(db_session, "Capatown")[0]
    page = admin_client.get(f"/admin/entries/{entry.id}/edit")
    assert page.status_code == 200
    assert "Edit Dictionary Entry" in page.text

    resp = admin_client.post(f"/admin/entries/{entry.id}", data={
        "phrase": "Capatown",
        "translation": "Calm down right now",
        "usage_context": "",
        "pronunciation": "CAP-a-town",
        "audio_url": "",
    }, follow_redirects=False)
    assert resp.status_code == 303

    db_session.expire_all()
    updated = crud.get_dictionary_entry(db_session, entry.id)
    assert updated.translation == "Calm down right now"
    assert updated.usage_context is None
    assert updated.pronunciation == "CAP-a-town"


def test_delete_entry_with_confirmation(admin_client, db_session):
    entry = crud.search_dictionary_entries(db_session, "Tipi tais")[0]
    entry_id = entry.id
    confirm = admin_client.get(f"/admin/entries/{entry_id}/delete")
    assert confirm.status_code == 200
    assert "Delete entry?" in confirm.text

    resp = admin_client.post(f"/admin/entries/{entry_id}/delete", follow_redirects=False)
    assert resp.status_code == 303
    db_session.expire_all()
    assert crud.get_dictionary_entry(db_session, entry_id) is None


def test_edit_missing_entry_redirects(admin_client):
    resp = admin_client.get("/admin/entries/9999/edit", follow_redirects=False)
    assert resp.status_code == 303


# -------------------- 站点设置 --------------------
def test_update_settings_from_form(admin_client):
    resp = admin_client.post("/admin/settings", data={
        "site_title": "Glossary of Tang",
        "site_description": "All the phrases",
        "gif_url": "",
        "loading_phrases": json.dumps(["Hold tight"]),
    }, follow_redirects=False)
    assert resp.status_code == 303

    home = admin_client.get("/")
    assert "Glossary of Tang" in home.text
    assert "Hold tight" in home.text
    assert admin_client.get("/api/settings/siteTitle").json()["value"] == "Glossary of Tang"


def test_update_settings_rejects_invalid_phrases(admin_client):
    resp = admin_client.post("/admin/settings", data={
        "site_title": "Glossary",
        "site_description": "All the phrases",
        "gif_url": "",
        "loading_phrases": "not json",
    })
    assert resp.status_code == 400
    assert "must be a valid JSON array" in resp.text


def test_update_settings_rejects_bad_gif_url(admin_client):
    resp = admin_client.post("/admin/settings", data={
        "site_title": "Glossary",
        "site_description": "All the phrases",
        "gif_url": "not-a-url",
        "loading_phrases": "[]",
    })
    assert resp.status_code == 400
    assert "must be a valid URL" in resp.text


# -------------------- 修改密码 --------------------
def test_change_password_from_form(admin_client):
    resp = admin_client.post("/admin/password", data={
        "current_password": ADMIN_PASSWORD,
        "new_password": "another-pass",
        "confirm_password": "another-pass",
    }, follow_redirects=False)
    assert resp.status_code == 303

    login = admin_client.post("/api/login", json={"username": ADMIN_USERNAME, "password": "another-pass"})
    assert login.status_code == 200


def test_change_password_mismatch(admin_client):
    resp = admin_client.post("/admin/password", data={
        "current_password": ADMIN_PASSWORD,
        "new_password": "another-pass",
        "confirm_password": "different-pass",
    })
    assert resp.status_code == 400
    assert "Passwords do not match" in resp.text


@pytest.mark.parametrize("path", [
    "/admin/entries/abc/edit",
    "/admin/entries/abc/delete",
    "/admin/entries/99999999999999999999/edit",
])
def test_invalid_entry_id_pages_redirect(admin_client, path):
    resp = admin_client.get(path, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin"


def test_invalid_entry_id_shows_flash(admin_client):
    resp = admin_client.get("/admin/entries/abc/edit")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "Dictionary entry not found" in resp.text


@pytest.mark.parametrize("path", ["/admin/entries/abc", "/admin/entries/abc/delete"])
def test_invalid_entry_id_posts_redirect(admin_client, path):
    resp = admin_client.post(path, data={"phrase": "Nope", "translation": "Nope"},
                             follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin"
