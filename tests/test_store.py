import os
import sys
import threading
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from readerview.models import ArticleRecord
from readerview.store import InMemoryArticleStore, token_id_generator


def _record(article_id: str, title: str = "Title") -> ArticleRecord:
    return ArticleRecord(id=article_id, source_url="https://site.org/", title=title, content="<p>x</p>")


class StoreTests(unittest.TestCase):
    def test_put_then_get(self) -> None:
        store = InMemoryArticleStore()
        record = _record("abc")
        self.assertEqual(store.put(record), "abc")
        self.assertIs(store.get("abc"), record)
        self.assertIn("abc", store)

    def test_unknown_id_is_a_miss(self) -> None:
        self.assertIsNone(InMemoryArticleStore().get("nonexistent"))

    def test_duplicate_id_rejected(self) -> None:
        store = InMemoryArticleStore()
        store.put(_record("dup"))
        with self.assertRaises(ValueError):
            store.put(_record("dup", title="Other"))
        self.assertEqual(store.get("dup").title, "Title")

    def test_concurrent_writers(self) -> None:
        store = InMemoryArticleStore()

        def writer(prefix: str) -> None:
            for i in range(200):
                store.put(_record(f"{prefix}-{i}"))
                store.get(f"{prefix}-{i}")

        threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(store), 1600)


class IdGeneratorTests(unittest.TestCase):
    def test_ids_are_unique_and_url_safe(self) -> None:
        ids = {token_id_generator() for _ in range(2000)}
        self.assertEqual(len(ids), 2000)
        for article_id in list(ids)[:50]:
            self.assertRegex(article_id, r"^[A-Za-z0-9_-]{22}$")


if __name__ == "__main__":
    unittest.main()
