import os
import tempfile
import unittest
from pathlib import Path

from playlist_smoother.config import env_float, env_str, load_local_env_file


class ConfigTests(unittest.TestCase):
    def test_load_local_env_file_loads_missing_values_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            env_path = Path(tmpdir) / ".env"
            env_path.write_text(
                """
# comment
GETSONGBPM_API_KEY=test-key
SPOTIPY_REDIRECT_URI="http://127.0.0.1:8888/callback"
KEEP_ME=from_file
                """.strip(),
                encoding="utf-8",
            )

            original_keep = os.environ.get("KEEP_ME")
            os.environ["KEEP_ME"] = "existing"
            os.environ.pop("GETSONGBPM_API_KEY", None)
            os.environ.pop("SPOTIPY_REDIRECT_URI", None)
            try:
                load_local_env_file(str(env_path))
                self.assertEqual(os.environ.get("GETSONGBPM_API_KEY"), "test-key")
                self.assertEqual(os.environ.get("SPOTIPY_REDIRECT_URI"), "http://127.0.0.1:8888/callback")
                self.assertEqual(os.environ.get("KEEP_ME"), "existing")
            finally:
                os.environ.pop("GETSONGBPM_API_KEY", None)
                os.environ.pop("SPOTIPY_REDIRECT_URI", None)
                if original_keep is None:
                    os.environ.pop("KEEP_ME", None)
                else:
                    os.environ["KEEP_ME"] = original_keep

    def test_missing_env_file_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            load_local_env_file(str(Path(tmpdir) / "missing.env"))

    def test_env_float_and_str_fallbacks(self) -> None:
        original = os.environ.get("BPM_REQUEST_DELAY")
        try:
            os.environ["BPM_REQUEST_DELAY"] = "0.5"
            self.assertEqual(env_float("BPM_REQUEST_DELAY", 0.2), 0.5)
            os.environ["BPM_REQUEST_DELAY"] = "slow"
            self.assertEqual(env_float("BPM_REQUEST_DELAY", 0.2), 0.2)
            os.environ["BPM_REQUEST_DELAY"] = "  "
            self.assertEqual(env_str("BPM_REQUEST_DELAY", "x"), "x")
        finally:
            if original is None:
                os.environ.pop("BPM_REQUEST_DELAY", None)
            else:
                os.environ["BPM_REQUEST_DELAY"] = original


if __name__ == "__main__":
    unittest.main()
