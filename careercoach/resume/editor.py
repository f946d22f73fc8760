"""
Редактор одной секции резюме: режимы "список" и "добавление".

LIST → ADD: пользователь нажал "добавить", записи не трогаются.
ADD → LIST: только после успешной валидации (или отмены).
"""
from enum import Enum

from careercoach.resume.entries import EntryBase, EntryForm, add_entry, build_entry, remove_entry


class EditorMode(str, Enum):
    LIST = "list"
    ADD = "add"


class SectionEditor:
    """Записи секции одного вида и текущий режим."""

    def __init__(self, kind: str, entries: list[EntryBase] | None = None):
        self.kind = kind
        self.entries: list[EntryBase] = list(entries or [])
        self.mode = EditorMode.LIST

    def start_adding(self) -> None:
        self.mode = EditorMode.ADD

    def cancel(self) -> None:
        self.mode = EditorMode.LIST

    def submit(self, form: EntryForm | dict) -> EntryBase:
        """
        Добавить запись из формы.

        При ошибке валидации остаёмся в режиме ADD и пробрасываем ResumeValidationError.
        """
        if self.mode is not EditorMode.ADD:
            raise RuntimeError("Call start_adding() before submitting an entry")
        entry = build_entry(self.kind, form)
        self.entries = add_entry(self.entries, entry)
        self.mode = EditorMode.LIST
        return entry

    def delete(self, index: int) -> None:
        if self.mode is not EditorMode.LIST:
            raise RuntimeError("Entries can only be deleted in list mode")
        self.entries = remove_entry(self.entries, index)
