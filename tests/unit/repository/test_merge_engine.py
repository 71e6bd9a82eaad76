"""Unit tests for three-way merge classification and conflict content."""

import pytest

from twig.repository import MergeAction, classify, conflict_content, plan_merge

S, H, O = "split-blob", "head-blob", "other-blob"


class TestClassify:
    @pytest.mark.parametrize(
        ("split", "head", "other", "expected"),
        [
            # Present at the split point
            pytest.param(S, S, S, MergeAction.KEEP_HEAD, id="unchanged"),
            pytest.param(S, S, O, MergeAction.TAKE_OTHER, id="modified-in-other"),
            pytest.param(S, H, S, MergeAction.KEEP_HEAD, id="modified-in-head"),
            pytest.param(S, H, O, MergeAction.CONFLICT, id="modified-differently"),
            pytest.param(S, H, H, MergeAction.KEEP_HEAD, id="modified-identically"),
            pytest.param(S, S, None, MergeAction.REMOVE, id="removed-in-other"),
            pytest.param(S, H, None, MergeAction.CONFLICT, id="modified-vs-removed"),
            pytest.param(S, None, S, MergeAction.NONE, id="removed-in-head"),
            pytest.param(S, None, O, MergeAction.CONFLICT, id="removed-vs-modified"),
            pytest.param(S, None, None, MergeAction.NONE, id="removed-in-both"),
            # Absent at the split point
            pytest.param(None, None, O, MergeAction.TAKE_OTHER, id="added-in-other"),
            pytest.param(None, H, None, MergeAction.KEEP_HEAD, id="added-in-head"),
            pytest.param(None, H, O, MergeAction.CONFLICT, id="added-differently"),
            pytest.param(None, H, H, MergeAction.KEEP_HEAD, id="added-identically"),
            pytest.param(None, None, None, MergeAction.NONE, id="never-present"),
        ],
    )
    def test_table(
        self,
        split: str | None,
        head: str | None,
        other: str | None,
        expected: MergeAction,
    ) -> None:
        assert classify(split, head, other) is expected

    @pytest.mark.parametrize(
        ("split", "head", "other"),
        [
            pytest.param(S, H, H, id="modified-identically"),
            pytest.param(None, H, H, id="added-identically"),
        ],
    )
    def test_identical_changes_can_be_conflicts(
        self, split: str | None, head: str, other: str
    ) -> None:
        action = classify(split, head, other, conflict_on_identical_changes=True)

        assert action is MergeAction.CONFLICT

    def test_flag_does_not_affect_unchanged_paths(self) -> None:
        action = classify(S, S, S, conflict_on_identical_changes=True)

        assert action is MergeAction.KEEP_HEAD


class TestPlanMerge:
    def test_covers_union_of_paths_in_sorted_order(self) -> None:
        plan = plan_merge(
            {"b": S, "c": S},
            {"b": S, "c": H},
            {"a": O, "b": O},
        )

        assert list(plan) == ["a", "b", "c"]
        assert plan == {
            "a": MergeAction.TAKE_OTHER,
            "b": MergeAction.TAKE_OTHER,
            "c": MergeAction.CONFLICT,
        }

    def test_empty_inputs(self) -> None:
        assert plan_merge({}, {}, {}) == {}


class TestConflictContent:
    def test_both_sides_present(self) -> None:
        result = conflict_content(b"ours\n", b"theirs\n")

        assert result == b"<<<<<<< HEAD\nours\n=======\ntheirs\n>>>>>>>\n"

    def test_missing_other_side_is_empty(self) -> None:
        result = conflict_content(b"ours\n", None)

        assert result == b"<<<<<<< HEAD\nours\n=======\n>>>>>>>\n"

    def test_missing_head_side_is_empty(self) -> None:
        result = conflict_content(None, b"theirs\n")

        assert result == b"<<<<<<< HEAD\n=======\ntheirs\n>>>>>>>\n"

    def test_newline_appended_to_unterminated_side(self) -> None:
        result = conflict_content(b"ours", b"theirs")

        assert result == b"<<<<<<< HEAD\nours\n=======\ntheirs\n>>>>>>>\n"

    def test_empty_content_adds_nothing(self) -> None:
        result = conflict_content(b"", b"x\n")

        assert result == b"<<<<<<< HEAD\n=======\nx\n>>>>>>>\n"
