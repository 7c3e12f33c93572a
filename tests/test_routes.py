"""Integration tests for routes."""

from tombs.engine.codec import SaveError
from tombs.session import TombsSession


def test_home_page(client):
    """Home page is accessible without certificate."""
    response = client.get("/")
    assert response.is_success
    assert "Tombs of the Ancient Kings" in response.body


def test_help_page(client):
    response = client.get("/help")
    assert response.is_success
    assert "descend" in response.body.lower()


def test_about_page(client):
    response = client.get("/about")
    assert response.is_success
    assert "roguelike" in response.body


def test_play_requires_cert(client):
    """Play page requires a client certificate."""
    response = client.get("/play")
    assert response.is_certificate_required


def test_play_with_cert(auth_client):
    """Play page shows the map and the welcome message."""
    response = auth_client.get("/play")
    assert response.is_success
    assert "@" in response.body
    assert "Welcome stranger!" in response.body
    assert "HP 30/30" in response.body


def test_go_direction(auth_client):
    response = auth_client.get("/go/n")
    assert response.is_success
    assert "Turn 1" in response.body


def test_go_unknown_direction_spends_no_turn(auth_client):
    auth_client.get("/go/up")
    response = auth_client.get("/play")
    assert "Turn 0" in response.body


def test_wait_route(auth_client):
    response = auth_client.get("/wait")
    assert response.is_success
    assert "Turn 1" in response.body


def test_turns_persist_between_requests(auth_client):
    auth_client.get("/wait")
    auth_client.get("/wait")
    response = auth_client.get("/play")
    assert "Turn 2" in response.body


def test_cmd_input_prompt(auth_client):
    """The /cmd route prompts for input when no query."""
    response = auth_client.get("/cmd")
    assert response.is_input_required


def test_cmd_with_input(auth_client):
    response = auth_client.get_input("/cmd", "dance")
    assert response.is_success
    assert "I don't understand that." in response.body


def test_get_with_nothing_here(auth_client):
    response = auth_client.get("/get")
    assert response.is_success
    assert "Nothing happens." in response.body


def test_inventory_route(auth_client):
    response = auth_client.get("/inventory")
    assert response.is_success
    assert "Inventory is empty." in response.body


def test_character_route(auth_client):
    response = auth_client.get("/character")
    assert response.is_success
    assert "Experience to level up: 350" in response.body


def test_new_game_prompt(auth_client):
    """The /new route prompts for confirmation."""
    response = auth_client.get("/new")
    assert response.is_input_required


def test_new_game_confirmed(auth_client):
    auth_client.get("/wait")
    response = auth_client.get_input("/new", "yes")
    assert response.is_success
    assert "A new descent begins!" in response.body
    assert "Turn 0" in response.body


def test_new_game_declined(auth_client):
    auth_client.get("/wait")
    auth_client.get_input("/new", "no")
    response = auth_client.get("/play")
    assert "Turn 1" in response.body


def test_help_page_explains_free_actions(client):
    body = client.get("/help").body
    assert "Each command takes one turn" not in body
    assert "cost nothing" in body


def test_failed_save_is_reported(auth_client, monkeypatch):
    def broken_save(self):
        raise SaveError("could not store the game")

    monkeypatch.setattr(TombsSession, "save", broken_save)

    response = auth_client.get("/wait")
    assert response.is_success
    assert "Could not save your game." in response.body

    response = auth_client.get("/play")
    assert response.is_success
    assert "Could not save your game." in response.body
