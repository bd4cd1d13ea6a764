"""Tests for prefixed id generation."""

import pytest

from learnpath.utils.id_generator import generate_id, id_for_table, to_base36


def test_prefix_and_uniqueness():
    ids = {generate_id("path") for _ in range(200)}

    assert len(ids) == 200
    assert all(i.startswith("path_") for i in ids)


def test_unknown_prefix_rejected():
    with pytest.raises(ValueError):
        generate_id("job")


def test_id_for_table():
    assert id_for_table("documents").startswith("doc_")


@pytest.mark.parametrize("num,expected", [(0, "0"), (35, "z"), (36, "10"), (46655, "zzz")])
def test_to_base36(num, expected):
    assert to_base36(num) == expected
