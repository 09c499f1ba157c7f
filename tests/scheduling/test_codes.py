import random
import re

import pytest

from services.scheduling import codes
from services.scheduling.codes import AccessCodeGenerator
from services.scheduling.errors import CodeSpaceExhausted


def test_room_code_is_six_digits():
    gen = AccessCodeGenerator(rng=random.Random(7))
    for _ in range(50):
        code = gen.generate(codes.ROOM)
        assert re.fullmatch(r"[0-9]{6}", code)
        assert 100000 <= int(code) <= 999999


def test_meeting_code_is_twelve_upper_alnum():
    gen = AccessCodeGenerator(rng=random.Random(7))
    for _ in range(50):
        assert re.fullmatch(r"[A-Z0-9]{12}", gen.generate(codes.MEETING))


def test_unknown_kind():
    with pytest.raises(ValueError):
        AccessCodeGenerator().generate("badge")


def test_same_seed_gives_same_codes():
    a = AccessCodeGenerator(rng=random.Random(42))
    b = AccessCodeGenerator(rng=random.Random(42))
    assert [a.generate(codes.MEETING) for _ in range(5)] == [b.generate(codes.MEETING) for _ in range(5)]


def test_generate_unique_skips_taken_codes():
    taken = set()
    gen = AccessCodeGenerator(rng=random.Random(3))
    for _ in range(20):
        code = gen.generate_unique(codes.MEETING, taken.__contains__)
        assert code not in taken
        taken.add(code)
    assert len(taken) == 20


def test_generate_unique_retries_after_collision():
    seen = []

    def exists(code):
        seen.append(code)
        return len(seen) < 3

    code = AccessCodeGenerator(rng=random.Random(1)).generate_unique(codes.ROOM, exists)
    assert len(seen) == 3
    assert code == seen[-1]


def test_exhausted_after_max_attempts():
    calls = []

    def always_taken(code):
        calls.append(code)
        return True

    gen = AccessCodeGenerator(rng=random.Random(1))
    with pytest.raises(CodeSpaceExhausted):
        gen.generate_unique(codes.ROOM, always_taken)
    assert len(calls) == 10


def test_max_attempts_is_configurable():
    calls = []
    gen = AccessCodeGenerator(rng=random.Random(1), max_attempts=2)
    with pytest.raises(CodeSpaceExhausted):
        gen.generate_unique(codes.MEETING, lambda c: calls.append(c) or True)
    assert len(calls) == 2
