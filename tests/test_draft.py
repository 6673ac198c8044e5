from __future__ import annotations

from prtui.draft import Field, FieldStore, PullRequestDraft


def test_field_step_wraps_both_directions() -> None:
    assert Field.TITLE.step(-1) is Field.TARGET_BRANCH
    assert Field.TARGET_BRANCH.step(1) is Field.TITLE
    assert Field.DESCRIPTION.step(1) is Field.SOURCE_BRANCH
    assert [f.label for f in Field] == ["Title", "Description", "Source Branch", "Target Branch"]


def test_only_description_is_multiline() -> None:
    assert [f for f in Field if f.multiline] == [Field.DESCRIPTION]


def test_draft_get_and_set_by_field() -> None:
    draft = PullRequestDraft()
    draft.set(Field.SOURCE_BRANCH, "feature")
    assert draft.source_branch == "feature"
    assert draft.get(Field.SOURCE_BRANCH) == "feature"


def test_append_drops_newlines_on_single_line_fields() -> None:
    store = FieldStore()
    store.append("a\nb")
    assert store.draft.title == "ab"
    store.select(Field.DESCRIPTION)
    store.append("a\nb")
    assert store.draft.description == "a\nb"


def test_backspace_on_empty_field_is_a_noop() -> None:
    store = FieldStore()
    store.backspace()
    assert store.draft.title == ""
    store.append("xy")
    store.backspace()
    assert store.current_value == "x"


def test_advance_returns_new_field() -> None:
    store = FieldStore()
    assert store.advance(-1) is Field.TARGET_BRANCH
    assert store.current_index == 3
    assert store.advance(1) is Field.TITLE


def test_reset_seeds_branches_and_selects_title() -> None:
    store = FieldStore(source_branch="feat", target_branch="main")
    store.append("Title")
    store.select(Field.DESCRIPTION)
    draft = store.reset(source_branch="feat", target_branch="develop")
    assert draft == PullRequestDraft(source_branch="feat", target_branch="develop")
    assert store.current_field is Field.TITLE
    assert store.reset(source_branch="feat", target_branch="develop") == draft
