from __future__ import annotations

import threading

import pytest
from test_helpers import FakeCardsApi, make_card

from clients.http_client import ApiError
from services.entity_store import EntityStore
from utils.entities import EntitySnapshot, UserProfile


@pytest.fixture
def api() -> FakeCardsApi:
    return FakeCardsApi(
        cards=[
            make_card("c1", owner_id="u1"),
            make_card("c2", owner_id="u2", liked_by={"u2"}),
            make_card("c3", owner_id="u3"),
        ]
    )


@pytest.fixture
def store(api) -> EntityStore:
    return EntityStore(api)


@pytest.fixture
def loaded_store(store) -> EntityStore:
    assert store.load_initial().is_success
    return store


def test_initial_state_is_empty(store):
    assert store.profile == UserProfile()
    assert store.cards == ()


def test_load_initial_applies_profile_and_cards_in_server_order(loaded_store):
    assert loaded_store.profile.id == "u1"
    assert [c.id for c in loaded_store.cards] == ["c1", "c2", "c3"]


@pytest.mark.parametrize("failing", ["get_profile", "list_cards"])
def test_load_initial_applies_nothing_if_either_fetch_fails(api, store, failing):
    api.fail.add(failing)
    seen = []
    store.subscribe(seen.append)

    result = store.load_initial()

    assert isinstance(result.error, ApiError)
    assert store.profile == UserProfile()
    assert store.cards == ()
    assert seen == []


def test_update_profile_replaces_profile_on_success(loaded_store):
    result = loaded_store.update_profile({"name": "Marie", "about": "Scientist"})

    assert result.is_success
    assert loaded_store.profile.name == "Marie"
    assert loaded_store.profile.about == "Scientist"
    assert loaded_store.profile.avatar_url == "a.png"


def test_update_profile_failure_keeps_old_profile(api, loaded_store):
    api.fail.add("set_profile")
    before = loaded_store.profile

    result = loaded_store.update_profile({"name": "Marie", "about": "Scientist"})

    assert result.is_error
    assert loaded_store.profile == before


def test_update_avatar(api, loaded_store):
    assert loaded_store.update_avatar("https://img.example/me.png").is_success
    assert loaded_store.profile.avatar_url == "https://img.example/me.png"

    api.fail.add("set_avatar")
    assert loaded_store.update_avatar("https://img.example/other.png").is_error
    assert loaded_store.profile.avatar_url == "https://img.example/me.png"


def test_toggle_like_follows_server_membership(api, loaded_store):
    card = loaded_store.get_card("c2")
    assert not loaded_store.is_liked(card)

    loaded_store.toggle_like(card)
    card = loaded_store.get_card("c2")
    assert api.calls[-1] == ("set_like", "c2", True)
    assert card.liked_by == {"u1", "u2"}
    assert loaded_store.is_liked(card)

    loaded_store.toggle_like(card)
    card = loaded_store.get_card("c2")
    assert api.calls[-1] == ("set_like", "c2", False)
    assert card.liked_by == {"u2"}
    assert not loaded_store.is_liked(card)


def test_toggle_like_uses_server_card_even_if_it_disagrees(api, loaded_store):
    card = loaded_store.get_card("c3")
    # server answers with a card that the current user still does not like
    api.set_like = lambda card_id, liked: make_card(card_id, owner_id="u3", liked_by={"u9"})

    result = loaded_store.toggle_like(card)

    assert result.is_success
    assert loaded_store.get_card("c3").liked_by == {"u9"}
    assert not loaded_store.is_liked(loaded_store.get_card("c3"))


def test_toggle_like_failure_leaves_card_unchanged(api, loaded_store):
    api.fail.add("set_like")
    card = loaded_store.get_card("c1")

    result = loaded_store.toggle_like(card)

    assert result.is_error
    assert loaded_store.get_card("c1") is card


def test_toggle_like_keeps_collection_order(loaded_store):
    loaded_store.toggle_like(loaded_store.get_card("c2"))

    assert [c.id for c in loaded_store.cards] == ["c1", "c2", "c3"]


def test_add_card_prepends_server_card(loaded_store):
    result = loaded_store.add_card({"name": "X", "link": "u"})

    assert result.is_success
    assert loaded_store.cards[0] == result.value
    assert loaded_store.cards[0].name == "X"
    assert len(loaded_store.cards) == 4


def test_add_card_failure_leaves_collection(api, loaded_store):
    api.fail.add("add_card")
    before = loaded_store.cards

    assert loaded_store.add_card({"name": "X", "link": "u"}).is_error
    assert loaded_store.cards == before


def test_remove_card_drops_matching_id(loaded_store):
    card = loaded_store.get_card("c2")

    result = loaded_store.remove_card(card)

    assert result.is_success
    assert len(loaded_store.cards) == 2
    assert loaded_store.get_card("c2") is None


def test_remove_card_failure_keeps_collection(api, loaded_store):
    api.fail.add("remove_card")
    before = loaded_store.cards

    result = loaded_store.remove_card(loaded_store.get_card("c2"))

    assert result.is_error
    assert loaded_store.cards == before


def test_can_remove_only_own_cards(loaded_store):
    assert loaded_store.can_remove(loaded_store.get_card("c1"))
    assert not loaded_store.can_remove(loaded_store.get_card("c2"))


def test_subscribers_get_snapshots(loaded_store):
    seen: list[EntitySnapshot] = []
    loaded_store.subscribe(seen.append)

    loaded_store.add_card({"name": "X", "link": "u"})

    assert len(seen) == 1
    assert seen[0].cards == loaded_store.cards
    assert seen[0].profile == loaded_store.profile


def test_failing_subscriber_does_not_block_others(loaded_store):
    seen = []

    def broken(_snapshot):
        raise RuntimeError("listener bug")

    loaded_store.subscribe(broken)
    loaded_store.subscribe(seen.append)

    loaded_store.update_avatar("x.png")

    assert len(seen) == 1


@pytest.mark.parametrize(
    "mutate",
    [
        lambda store: store.toggle_like(store.get_card("c3")),
        lambda store: store.add_card({"name": "X", "link": "u"}),
        lambda store: store.remove_card(store.get_card("c1")),
    ],
)
def test_listeners_run_without_holding_the_store_lock(loaded_store, mutate):
    read_from_other_thread: list[EntitySnapshot] = []

    def listener(_snapshot):
        reader = threading.Thread(target=lambda: read_from_other_thread.append(loaded_store.snapshot()))
        reader.start()
        reader.join(timeout=1.0)

    loaded_store.subscribe(listener)

    assert mutate(loaded_store).is_success
    assert len(read_from_other_thread) == 1
    assert read_from_other_thread[0].cards == loaded_store.cards
