from __future__ import annotations

from typing import Any

from handleff import execute
from handleff.effects import Prompt, create_prompt


class TestShift0Reset:
    def test_effect_name(self):
        prompt = create_prompt()
        assert isinstance(prompt, Prompt)
        assert "Shift0Reset#shift0" in str(prompt.shift0_effect)

    def test_reset_without_shift0(self):
        prompt = create_prompt()

        def main():
            return 3
            yield

        assert execute(prompt.reset(main)) == 3

    def test_two_captures(self):
        prompt = create_prompt()
        checks: list[tuple[Any, Any]] = []

        def main():
            def first(k):
                checks.append(((yield from k(1)), 4))
                return 5

            v1 = yield from prompt.shift0(first)
            checks.append((v1, 1))

            def second(k):
                checks.append(((yield from k(2)), 3))
                return 4

            v2 = yield from prompt.shift0(second)
            checks.append((v2, 2))
            return v1 + v2

        assert execute(prompt.reset(main)) == 5
        assert len(checks) == 4
        for actual, expected in checks:
            assert actual == expected

    def test_discarding_continuation_aborts(self):
        prompt = create_prompt()
        reached: list[str] = []

        def main():
            yield from prompt.shift0(lambda k: "aborted")
            reached.append("after shift0")
            return "completed"

        assert execute(prompt.reset(main)) == "aborted"
        assert reached == []

    def test_result_combined_arithmetically(self):
        prompt = create_prompt()

        def add_ten(k):
            result = yield from k(5)
            return result + 10

        def main():
            x = yield from prompt.shift0(add_ten)
            return x * 2

        assert execute(prompt.reset(main)) == 20

    def test_shift0_body_runs_outside_its_reset(self):
        prompt = create_prompt()

        def inner_body(k):
            return (yield from prompt.shift0(lambda k2: "caught by outer reset"))

        def inner():
            yield from prompt.shift0(inner_body)
            return "unreachable"

        def outer():
            result = yield from prompt.reset(inner)
            return ("after inner reset", result)

        assert execute(prompt.reset(outer)) == "caught by outer reset"

    def test_separate_prompts_nest(self):
        p = create_prompt()
        q = create_prompt()

        def main():
            x = yield from p.shift0(lambda k: k(10))
            y = yield from q.shift0(lambda k: k(1))
            return x + y

        assert execute(p.reset(lambda: q.reset(main))) == 11
