"""Tests for RedisManager and the profile service."""

import pytest

from chat_agent.services.profile_service import ProfileService
from chat_shared.redis_manager import RedisManager, build_redis_manager


def test_json_and_text_helpers(fake_redis):
    manager = RedisManager(fake_redis, namespace="ns:", default_ttl=60)

    manager.set_json("k", {"a": 1})
    assert manager.get_json("k") == {"a": 1}
    assert fake_redis.ttls["k"] == 60

    manager.set_text("t", "hello", ttl=5)
    assert manager.get_text("t") == "hello"
    assert fake_redis.ttls["t"] == 5

    manager.delete("t")
    assert manager.get_text("t") is None


def test_get_json_ignores_invalid_payloads(fake_redis):
    manager = RedisManager(fake_redis)
    fake_redis.set("bad", "not json")
    fake_redis.set("list", "[1, 2]")
    assert manager.get_json("bad") is None
    assert manager.get_json("list") is None
    assert manager.get_json("missing") is None


def test_profile_keys_are_namespaced(fake_redis):
    manager = RedisManager(fake_redis, namespace="chat:agent:")
    assert manager.get_profile_key("u1") == "chat:agent:profile:u1"
    assert manager.get_profile_entries_key("u1") == "chat:agent:profile-entries:u1"


def test_build_redis_manager_requires_a_client_or_url():
    with pytest.raises(ValueError):
        build_redis_manager()


def test_build_redis_manager_with_client(fake_redis):
    manager = build_redis_manager(redis_client=fake_redis, namespace="x")
    assert manager.get_profile_key("u") == "x:profile:u"


def test_profile_text(redis_manager):
    profiles = ProfileService(redis_manager)
    assert profiles.get_profile("u1") == ""
    profiles.set_profile("u1", "# Sam")
    assert profiles.get_profile("u1") == "# Sam"
    assert profiles.get_profile("u2") == ""


def test_profile_entries(redis_manager):
    profiles = ProfileService(redis_manager)
    first = profiles.append_entry("u1", "information", "Lives in London")
    second = profiles.append_entry("u1", "note", "Birthday in May")

    assert first["id"] != second["id"]
    assert [e["content"] for e in profiles.get_entries("u1")] == [
        "Lives in London",
        "Birthday in May",
    ]

    updated = profiles.update_entry("u1", first["id"], "Lives in Leeds")
    assert updated == {"id": first["id"], "category": "information", "content": "Lives in Leeds"}
    assert profiles.update_entry("u1", "nope0", "x") is None


def test_profile_entries_validate_input(redis_manager):
    profiles = ProfileService(redis_manager)
    with pytest.raises(ValueError):
        profiles.append_entry("u1", "mood", "x")
    with pytest.raises(ValueError):
        profiles.append_entry("u1", "note", "")
    with pytest.raises(ValueError):
        profiles.update_entry("u1", "abcde", "x", category="mood")
