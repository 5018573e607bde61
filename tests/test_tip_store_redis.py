import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from weather_guide.domain import TipCategory
from weather_guide.tip_store.redis import RedisTipStore


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.zsets = {}
        self.hashes = {}

    def set(self, key, value, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        return True

    def get(self, key):
        return self.store.get(key)

    def zadd(self, key, mapping):
        self.zsets.setdefault(key, {}).update(mapping)

    def zrevrange(self, key, start, end):
        members = sorted(self.zsets.get(key, {}).items(), key=lambda kv: kv[1], reverse=True)
        names = [m.encode("utf-8") for m, _ in members]
        return names[start:] if end == -1 else names[start:end + 1]

    def zrem(self, key, member):
        self.zsets.get(key, {}).pop(member, None)

    def hget(self, key, field):
        value = self.hashes.get(key, {}).get(field)
        return None if value is None else str(value).encode("utf-8")

    def hincrby(self, key, field, amount):
        bucket = self.hashes.setdefault(key, {})
        bucket[field] = bucket.get(field, 0) + amount
        return bucket[field]

    def hdel(self, key, field):
        self.hashes.get(key, {}).pop(field, None)

    def delete(self, key):
        self.store.pop(key, None)
        self.zsets.pop(key, None)
        self.hashes.pop(key, None)

    def scan_iter(self, pattern):
        prefix = pattern.rstrip("*")
        keys = list(self.store) + list(self.zsets) + list(self.hashes)
        return [k for k in keys if k.startswith(prefix)]

    def pipeline(self, transaction=True):
        return FakePipeline(self)


class FakePipeline:
    """Queues commands and applies them all on execute()."""

    def __init__(self, client):
        self.client = client
        self.commands = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.commands.append((name, args, kwargs))
            return self
        return queue

    def execute(self):
        return [getattr(self.client, name)(*args, **kwargs) for name, args, kwargs in self.commands]


class FailingIndexRedis(FakeRedis):
    def zadd(self, key, mapping):
        raise ConnectionError("redis went away")


class FailingPipelineRedis(FakeRedis):
    def pipeline(self, transaction=True):
        pipe = FakePipeline(self)

        def execute():
            raise ConnectionError("redis went away")

        pipe.execute = execute
        return pipe


class ConcurrentDeleteRedis(FakeRedis):
    """Deletes the tip just before the like counter is bumped."""

    def hincrby(self, key, field, amount):
        self.store = {k: v for k, v in self.store.items() if not k.endswith(f"tip:{field}")}
        return super().hincrby(key, field, amount)


class _Clock:
    """Stand-in for datetime whose now() advances a second per call."""

    def __init__(self):
        self.current = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)

    def now(self, tz=None):
        self.current += timedelta(seconds=1)
        return self.current


class TestRedisTipStore(unittest.TestCase):
    def setUp(self):
        self.client = FakeRedis()
        self.store = RedisTipStore(self.client, prefix="test:")

    def test_add_persists_json_and_index(self):
        tip = self.store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.", TipCategory.TRAVEL)
        self.assertIn(f"test:tip:{tip.id}", self.client.store)
        self.assertIn(tip.id, self.client.zsets["test:location:pune, india"])
        self.assertNotIn("likes", self.client.store[f"test:tip:{tip.id}"])

        loaded = self.store.get_tip(tip.id)
        self.assertEqual(loaded, tip)

    def test_list_newest_first(self):
        with patch("weather_guide.tip_store.redis.datetime", _Clock()):
            first = self.store.add_tip("Pune, India", "a", "one")
            second = self.store.add_tip("pune,  india", "b", "two")
        self.store.add_tip("Goa, India", "c", "three")
        tips = self.store.list_tips("Pune, India")
        self.assertEqual([t.id for t in tips], [second.id, first.id])

    def test_like_uses_counter_hash(self):
        tip = self.store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.")
        self.store.like_tip(tip.id)
        liked = self.store.like_tip(tip.id)
        self.assertEqual(liked.likes, 2)
        self.assertEqual(self.client.hashes["test:likes"][tip.id], 2)
        self.assertIsNone(self.store.like_tip("missing"))
        self.assertNotIn("missing", self.client.hashes["test:likes"])

    def test_id_collision_is_rejected(self):
        with patch.object(RedisTipStore, "_generate_id", return_value="fixed"):
            self.store.add_tip("Pune, India", "a", "one")
            with self.assertRaises(RuntimeError):
                self.store.add_tip("Pune, India", "b", "two")
        self.assertEqual(len(self.store.list_tips("Pune, India")), 1)

    def test_delete_removes_all_traces(self):
        tip = self.store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.")
        self.store.like_tip(tip.id)
        self.assertTrue(self.store.delete_tip(tip.id))
        self.assertIsNone(self.store.get_tip(tip.id))
        self.assertEqual(self.store.list_tips("Pune, India"), [])
        self.assertNotIn(tip.id, self.client.hashes.get("test:likes", {}))
        self.assertFalse(self.store.delete_tip(tip.id))

    def test_failed_index_write_leaves_no_tip_behind(self):
        client = FailingIndexRedis()
        store = RedisTipStore(client, prefix="tips:")
        with self.assertRaises(ConnectionError):
            store.add_tip("Pune", "a", "b")
        self.assertEqual([k for k in client.store if k.startswith("tips:tip:")], [])

    def test_failed_delete_keeps_tip_intact(self):
        client = FailingPipelineRedis()
        store = RedisTipStore(client, prefix="test:")
        tip = store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.")
        store.like_tip(tip.id)
        with self.assertRaises(ConnectionError):
            store.delete_tip(tip.id)
        self.assertEqual(store.get_tip(tip.id).likes, 1)
        self.assertEqual([t.id for t in store.list_tips("Pune, India")], [tip.id])

    def test_like_racing_delete_leaves_no_counter(self):
        client = ConcurrentDeleteRedis()
        store = RedisTipStore(client, prefix="test:")
        tip = store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.")
        self.assertIsNone(store.like_tip(tip.id))
        self.assertNotIn(tip.id, client.hashes.get("test:likes", {}))

    def test_clear_only_touches_prefix(self):
        self.client.set("other:key", "keep")
        self.store.add_tip("Pune, India", "meera", "Sinhagad at sunrise.")
        self.store.clear()
        self.assertEqual(self.store.list_tips("Pune, India"), [])
        self.assertEqual(self.client.get("other:key"), "keep")


if __name__ == "__main__":
    unittest.main()
