"""Repository host, git remote and request catalog helpers."""
