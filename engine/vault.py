from __future__ import annotations

import shutil
from pathlib import Path, PurePosixPath


class Vault:
    """Document store over a directory; all paths are vault-relative POSIX strings."""

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()

    def resolve(self, rel: str) -> Path:
        parts = PurePosixPath(rel).parts
        if any(part == ".." for part in parts) or PurePosixPath(rel).is_absolute():
            raise ValueError(f"path escapes the vault: {rel!r}")
        return self.root.joinpath(*parts)

    def exists(self, rel: str) -> bool:
        return self.resolve(rel).exists()

    def is_folder(self, rel: str) -> bool:
        return self.resolve(rel).is_dir()

    def create_folder(self, rel: str) -> None:
        """Create one folder; raises FileExistsError if it is already there."""
        self.resolve(rel).mkdir(parents=False, exist_ok=False)

    def ensure_folder(self, rel: str) -> None:
        target = self.resolve(rel)
        if target.is_dir():
            return
        target.mkdir(parents=True)

    def read(self, rel: str) -> str:
        return self.resolve(rel).read_text(encoding="utf-8")

    def write(self, rel: str, text: str) -> None:
        with self.resolve(rel).open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)

    def append(self, rel: str, text: str) -> None:
        with self.resolve(rel).open("a", encoding="utf-8", newline="\n") as handle:
            handle.write(text)

    def mtime(self, rel: str) -> float:
        return self.resolve(rel).stat().st_mtime

    def list_folders(self, rel: str) -> list[str]:
        base = self.resolve(rel)
        if not base.is_dir():
            return []
        return sorted(
            str(PurePosixPath(rel) / child.name) for child in base.iterdir() if child.is_dir()
        )

    def list_notes(self, exclude: str | None = None) -> list[str]:
        """Markdown files anywhere in the vault, skipping one top-level folder."""
        if not self.root.is_dir():
            return []
        notes = []
        for path in self.root.rglob("*.md"):
            rel = path.relative_to(self.root).as_posix()
            if exclude and (rel == exclude or rel.startswith(exclude.rstrip("/") + "/")):
                continue
            if any(part.startswith(".") for part in path.relative_to(self.root).parts):
                continue
            notes.append(rel)
        return sorted(notes, key=str.lower)

    def remove_tree(self, rel: str) -> None:
        shutil.rmtree(self.resolve(rel))
