"""
Integration tests for the fingerprinting pool and the full scan pipeline.
"""

import os
import shutil
import threading
import time

import pytest
from PIL import Image

import dupescan.scanner.file_discovery as file_discovery
from dupescan.progress import ScanProgress
from dupescan.scanner import find_duplicates, fingerprint_images_parallel, extract_duplicate_groups, load_image


@pytest.fixture
def hundred_and_a_pair(temp_dir, coded_image):
    """101 distinct images (codes 0-100) plus a copy of the last one: 102 files."""
    root = temp_dir / "many"
    root.mkdir()
    for code in range(101):
        subdir = root / f"batch{code % 7}"
        subdir.mkdir(exist_ok=True)
        coded_image(code).save(subdir / f"img{code:03d}.png")
    shutil.copyfile(root / "batch2" / "img100.png", root / "copy_of_100.png")
    return root


class TestFindDuplicates:
    """Test the full directory scan."""

    def test_pair_and_non_image(self, sample_images, temp_dir, user_config):
        os.remove(sample_images['unique'])
        result = find_duplicates(temp_dir, workers=2, user_config=user_config)

        groups = extract_duplicate_groups(result.buckets)
        assert [g.paths for g in groups] == [[sample_images['a'], sample_images['b']]]
        assert result.total_files == 2
        assert result.failures == []
        assert result.progress == 1.0
        assert not result.cancelled

    def test_unreadable_subdirectory(self, temp_dir, monkeypatch, user_config, coded_image):
        (temp_dir / "locked").mkdir()
        coded_image(1).save(temp_dir / "locked" / "hidden.png")
        (temp_dir / "open").mkdir()
        coded_image(2).save(temp_dir / "open" / "only.png")

        original = file_discovery._list_directory

        def failing(directory, follow_symlinks):
            if os.path.basename(directory) == "locked":
                raise PermissionError(13, "Permission denied", directory)
            return original(directory, follow_symlinks)

        monkeypatch.setattr(file_discovery, "_list_directory", failing)

        result = find_duplicates(temp_dir, user_config=user_config)
        assert [(f.path, f.kind) for f in result.failures] == [(str(temp_dir / "locked"), "directory")]
        assert result.duplicate_groups() == []
        assert result.fingerprinted == 1
        assert result.progress == 1.0

    def test_hundred_unique_and_one_pair(self, hundred_and_a_pair, user_config):
        calls = []
        result = find_duplicates(
            hundred_and_a_pair,
            workers=4,
            progress_callback=lambda done, total: calls.append((done, total)),
            user_config=user_config,
        )

        assert result.total_files == 102
        assert result.progress == 1.0
        # at most one notification for start and one per completion
        assert all(total == 102 for _, total in calls)
        assert calls[-1] == (102, 102)
        assert len(calls) <= 103
        completed = [done for done, _ in calls]
        assert completed == sorted(completed)

        groups = result.duplicate_groups()
        assert len(groups) == 1
        assert groups[0].paths == sorted([
            str(hundred_and_a_pair / "batch2" / "img100.png"),
            str(hundred_and_a_pair / "copy_of_100.png"),
        ])
        assert len(result.buckets) == 101

    def test_every_path_in_exactly_one_bucket(self, hundred_and_a_pair, user_config):
        (hundred_and_a_pair / "broken.jpg").write_text("not really a jpeg")
        result = find_duplicates(hundred_and_a_pair, user_config=user_config)

        bucketed = [p for paths in result.buckets.values() for p in paths]
        assert len(bucketed) == len(set(bucketed))

        all_candidates = {
            os.path.join(dirpath, name)
            for dirpath, _, names in os.walk(hundred_and_a_pair)
            for name in names
        }
        decode_failures = {f.path for f in result.failures_of_kind("decode")}
        assert decode_failures == {str(hundred_and_a_pair / "broken.jpg")}
        assert set(bucketed) == all_candidates - decode_failures
        assert result.progress == 1.0

    def test_idempotent(self, hundred_and_a_pair, user_config):
        first = find_duplicates(hundred_and_a_pair, workers=8, user_config=user_config)
        second = find_duplicates(hundred_and_a_pair, workers=1, user_config=user_config)
        assert first.buckets == second.buckets
        assert first.duplicate_groups() == second.duplicate_groups()

    def test_resolution_independent_duplicates(self, temp_dir, gradient_image, user_config):
        gradient_image(90, 80).save(temp_dir / "small.png")
        gradient_image(450, 400).save(temp_dir / "large.jpg", quality=95)
        result = find_duplicates(temp_dir, user_config=user_config)
        groups = result.duplicate_groups()
        assert len(groups) == 1
        assert groups[0].filenames == ["large.jpg", "small.png"]

    def test_empty_directory(self, temp_dir, user_config):
        result = find_duplicates(temp_dir, user_config=user_config)
        assert result.buckets == {}
        assert result.failures == []
        assert result.total_files == 0
        assert result.progress == 1.0

    def test_missing_root(self, temp_dir, user_config):
        missing = temp_dir / "missing"
        result = find_duplicates(missing, user_config=user_config)
        assert result.buckets == {}
        assert len(result.failures) == 1
        assert result.failures[0].path == str(missing)
        assert result.failures[0].kind == "directory"

    def test_decoder_failure_is_local(self, hundred_and_a_pair, user_config):
        def flaky(path):
            if path.endswith("img050.png"):
                raise OSError("disk hiccup")
            return load_image(path)

        result = find_duplicates(hundred_and_a_pair, decoder=flaky, user_config=user_config)
        assert [os.path.basename(f.path) for f in result.failures] == ["img050.png"]
        assert "disk hiccup" in result.failures[0].reason
        assert result.fingerprinted == 101
        assert result.progress == 1.0

    def test_shared_progress_is_monotonic(self, hundred_and_a_pair, user_config):
        progress = ScanProgress()
        seen = []
        stop = threading.Event()

        def poll():
            while not stop.is_set():
                seen.append(progress.value)
                time.sleep(0.001)

        poller = threading.Thread(target=poll)
        poller.start()
        try:
            result = find_duplicates(hundred_and_a_pair, progress=progress, user_config=user_config)
        finally:
            stop.set()
            poller.join()

        assert seen == sorted(seen)
        assert all(0.0 <= v <= 1.0 for v in seen)
        assert progress.value == result.progress == 1.0

    def test_settings_from_user_config(self, temp_dir, config_dir, coded_image):
        from dupescan.user_config import UserConfig

        (config_dir / "config.json").write_text('{"grid_width": 5, "grid_height": 4}')
        coded_image(3).save(temp_dir / "x.png")
        result = find_duplicates(temp_dir, user_config=UserConfig(config_dir))
        (fingerprint,) = result.buckets
        # 4x4 bits -> 4 hex digits
        assert len(fingerprint) == 4

    def test_max_image_pixels_from_user_config(self, temp_dir, config_dir, gradient_image, monkeypatch):
        from dupescan.user_config import UserConfig

        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", Image.MAX_IMAGE_PIXELS)
        (config_dir / "config.json").write_text('{"max_image_pixels": 1000}')
        gradient_image(90, 80).save(temp_dir / "big.png")

        result = find_duplicates(temp_dir, user_config=UserConfig(config_dir))
        assert Image.MAX_IMAGE_PIXELS == 1000
        assert [(f.path, f.kind) for f in result.failures] == [(str(temp_dir / "big.png"), "decode")]

    def test_max_image_pixels_zero_disables_check(self, temp_dir, user_config, gradient_image, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        gradient_image(90, 80).save(temp_dir / "big.png")

        result = find_duplicates(temp_dir, max_image_pixels=0, user_config=user_config)
        assert Image.MAX_IMAGE_PIXELS is None
        assert result.failures == []
        assert result.fingerprinted == 1

    @pytest.mark.parametrize("kwargs", [
        {"workers": 0},
        {"max_concurrent_dirs": 0},
        {"grid_width": 1},
        {"max_image_pixels": -1},
    ])
    def test_invalid_settings(self, temp_dir, user_config, kwargs):
        with pytest.raises(ValueError):
            find_duplicates(temp_dir, user_config=user_config, **kwargs)


class TestFingerprintImagesParallel:
    """Test the bounded worker pool directly."""

    def test_missing_files_recorded(self, sample_images, temp_dir):
        paths = [sample_images['a'], str(temp_dir / "gone.png"), sample_images['b']]
        buckets, failures, cancelled = fingerprint_images_parallel(paths, max_workers=2)

        assert not cancelled
        assert [f.path for f in failures] == [str(temp_dir / "gone.png")]
        assert list(buckets.as_dict().values()) == [sorted([sample_images['a'], sample_images['b']])]

    def test_stop_before_start(self, sample_images):
        stop = threading.Event()
        stop.set()
        progress = ScanProgress()
        buckets, failures, cancelled = fingerprint_images_parallel(
            [sample_images['a'], sample_images['b']], progress=progress, stop_event=stop,
        )
        assert cancelled
        assert len(buckets) == 0
        assert progress.value == 0.0

    def test_stop_between_submissions(self, hundred_and_a_pair):
        paths = sorted(
            os.path.join(dirpath, name)
            for dirpath, _, names in os.walk(hundred_and_a_pair)
            for name in names
        )
        stop = threading.Event()
        progress = ScanProgress()

        def stopping_decoder(path):
            stop.set()
            return load_image(path)

        buckets, failures, cancelled = fingerprint_images_parallel(
            paths, max_workers=1, decoder=stopping_decoder, progress=progress, stop_event=stop,
        )
        processed = progress.snapshot().completed
        assert cancelled
        assert 1 <= processed < len(paths)
        assert progress.value < 1.0
        # everything that was submitted finished and was bucketed
        assert sum(len(p) for p in buckets.as_dict().values()) == processed

    def test_empty_input(self):
        progress = ScanProgress()
        buckets, failures, cancelled = fingerprint_images_parallel([], progress=progress)
        assert len(buckets) == 0
        assert failures == []
        assert not cancelled
        assert progress.value == 1.0

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            fingerprint_images_parallel(["a.png"], max_workers=0)

    def test_slow_listener_does_not_serialize_workers(self, coded_image):
        image = coded_image(7)

        def slow_decoder(path):
            time.sleep(0.1)
            return image.copy()

        def slow_listener(done, total):
            time.sleep(0.1)

        paths = [f"img{i:02d}.png" for i in range(16)]
        start = time.perf_counter()
        buckets, failures, cancelled = fingerprint_images_parallel(
            paths, max_workers=8, decoder=slow_decoder, progress_callback=slow_listener,
        )
        elapsed = time.perf_counter() - start

        assert not cancelled
        assert failures == []
        assert sum(len(p) for p in buckets.as_dict().values()) == 16
        # 17 serialized listener calls alone would take 1.7s
        assert elapsed < 1.0
