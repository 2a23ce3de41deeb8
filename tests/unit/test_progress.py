from __future__ import annotations

import sys
from unittest.mock import Mock, patch

from datamine.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stderr_isatty():
    with patch.object(sys, "stderr", Mock(isatty=Mock(return_value=True))):
        assert is_tty_enabled() is True
    with patch.object(sys, "stderr", Mock(isatty=Mock(return_value=False))):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """ProgressTracker with and without a terminal."""

    def test_init_with_tty_enabled(self):
        with patch("datamine.services.progress.is_tty_enabled", return_value=True), \
             patch("datamine.services.progress.tqdm") as mock_tqdm:
            tracker = ProgressTracker(4, description="Languages", unit="lang")

            assert tracker.total == 4
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=4,
                desc="Languages",
                unit="lang",
                file=sys.stderr,
                leave=False,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch("datamine.services.progress.is_tty_enabled", return_value=False), \
             patch("datamine.services.progress.tqdm") as mock_tqdm:
            tracker = ProgressTracker(4)

            assert tracker.enabled is False
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_advance_updates_bar_with_label(self):
        mock_pbar = Mock()
        with patch("datamine.services.progress.is_tty_enabled", return_value=True), \
             patch("datamine.services.progress.tqdm", return_value=mock_pbar):
            tracker = ProgressTracker(2)
            tracker.advance("French")

            assert tracker.current == 1
            mock_pbar.set_postfix_str.assert_called_once_with("French", refresh=False)
            mock_pbar.update.assert_called_once_with(1)

    def test_advance_without_tty(self):
        with patch("datamine.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(2)
            tracker.advance("English")
            tracker.advance()
            assert tracker.current == 2

    def test_context_manager_closes_bar(self):
        mock_pbar = Mock()
        with patch("datamine.services.progress.is_tty_enabled", return_value=True), \
             patch("datamine.services.progress.tqdm", return_value=mock_pbar):
            with ProgressTracker(1) as tracker:
                tracker.advance()
            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
            # 二重 close は無視
            tracker.close()
            mock_pbar.close.assert_called_once()
