"""
Unit tests for bucket aggregation and duplicate extraction.
"""

import threading

from dupescan.models import DuplicateGroup
from dupescan.scanner import HashBuckets, extract_duplicate_groups


class TestHashBuckets:
    """Test the thread-safe bucket map."""

    def test_groups_by_fingerprint(self):
        buckets = HashBuckets()
        buckets.add("ff00", "/b.png")
        buckets.add("00ff", "/c.png")
        buckets.add("ff00", "/a.png")
        assert buckets.as_dict() == {"00ff": ["/c.png"], "ff00": ["/a.png", "/b.png"]}
        assert len(buckets) == 2

    def test_keys_use_fingerprint_string(self, coded_image):
        from dupescan.scanner import compute_dhash

        fp = compute_dhash(coded_image(7))
        buckets = HashBuckets()
        buckets.add(fp, "/x.png")
        assert list(buckets.as_dict()) == [str(fp)]

    def test_concurrent_adds(self):
        buckets = HashBuckets()

        def worker(n):
            for i in range(500):
                buckets.add(f"{i % 10:02x}", f"/t{n}/{i}.png")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = buckets.as_dict()
        assert len(snapshot) == 10
        assert sum(len(paths) for paths in snapshot.values()) == 4000


class TestExtractDuplicateGroups:
    """Test extract_duplicate_groups function."""

    def test_singletons_dropped(self):
        assert extract_duplicate_groups({"aa": ["/one.png"], "bb": ["/two.png"]}) == []

    def test_empty_map(self):
        assert extract_duplicate_groups({}) == []

    def test_deterministic_order(self):
        buckets = {
            "01": ["/z/2.png", "/z/1.png"],
            "02": ["/m/b.png", "/a/x.png", "/q/c.png"],
            "03": ["/solo.png"],
        }
        groups = extract_duplicate_groups(buckets)
        assert groups == [
            DuplicateGroup(id=1, fingerprint="02", paths=["/a/x.png", "/m/b.png", "/q/c.png"]),
            DuplicateGroup(id=2, fingerprint="01", paths=["/z/1.png", "/z/2.png"]),
        ]

    def test_insertion_order_irrelevant(self):
        forward = {"01": ["/a.png", "/b.png"], "02": ["/c.png", "/d.png"]}
        backward = {"02": ["/d.png", "/c.png"], "01": ["/b.png", "/a.png"]}
        assert extract_duplicate_groups(forward) == extract_duplicate_groups(backward)

    def test_start_id(self):
        groups = extract_duplicate_groups({"01": ["/a.png", "/b.png"]}, start_id=5)
        assert groups[0].id == 5
