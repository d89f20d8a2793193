"""
Vault paths stay inside the root; listings skip what they should.
"""

import pytest

from engine.vault import Vault


@pytest.fixture
def vault(tmp_path):
    return Vault(tmp_path)


class TestResolve:
    @pytest.mark.parametrize("rel", ["../outside.md", "a/../../b", "/etc/passwd"])
    def test_escapes_rejected(self, vault, rel):
        with pytest.raises(ValueError):
            vault.resolve(rel)

    def test_nested(self, vault, tmp_path):
        assert vault.resolve("a/b.md") == tmp_path.resolve() / "a" / "b.md"


class TestFolders:
    def test_create_folder_twice_raises(self, vault):
        vault.create_folder("x")
        with pytest.raises(FileExistsError):
            vault.create_folder("x")

    def test_ensure_folder_is_idempotent(self, vault):
        vault.ensure_folder("a/b")
        vault.ensure_folder("a/b")
        assert vault.is_folder("a/b")

    def test_list_folders_missing_is_empty(self, vault):
        assert vault.list_folders("nope") == []

    def test_list_folders_ignores_files(self, vault):
        vault.ensure_folder("top/one")
        vault.write("top/file.md", "x")
        assert vault.list_folders("top") == ["top/one"]


class TestNotes:
    def test_excludes_chat_folder_and_hidden(self, vault):
        vault.write("b.md", "")
        vault.ensure_folder("Notes")
        vault.write("Notes/A.md", "")
        vault.ensure_folder("Chats/c1")
        vault.write("Chats/c1/chat.md", "")
        vault.ensure_folder(".trash")
        vault.write(".trash/old.md", "")
        assert vault.list_notes(exclude="Chats") == ["b.md", "Notes/A.md"]

    def test_append_keeps_existing_text(self, vault):
        vault.write("n.md", "one\n")
        vault.append("n.md", "two\n")
        assert vault.read("n.md") == "one\ntwo\n"
