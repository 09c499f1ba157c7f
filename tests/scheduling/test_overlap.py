from datetime import datetime

import pytest

from services.scheduling.overlap import overlaps


def t(h, m=0):
    return datetime(2030, 1, 1, h, m)


@pytest.mark.parametrize("a, b, expected", [
    ((t(10), t(11)), (t(10, 30), t(11, 30)), True),
    ((t(10), t(12)), (t(10, 30), t(11)), True),
    ((t(10), t(11)), (t(11), t(12)), False),
    ((t(10), t(11)), (t(12), t(13)), False),
    ((t(9), t(10)), (t(9), t(10)), True),
])
def test_overlaps_is_symmetric(a, b, expected):
    assert overlaps(*a, *b) is expected
    assert overlaps(*b, *a) is expected


def test_range_overlaps_itself():
    assert overlaps(t(8), t(8, 1), t(8), t(8, 1))


def test_back_to_back_ranges_do_not_overlap():
    assert not overlaps(t(9), t(10), t(10), t(11))
    assert not overlaps(t(10), t(11), t(9), t(10))
