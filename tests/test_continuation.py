from __future__ import annotations

import threading
from typing import Any

import pytest

from handleff import (
    Continuation,
    DoubleResumeError,
    RehandledContinuation,
    execute,
    handler,
    handlers,
    inst,
)


class TestOneShot:
    def test_second_resume_fails(self):
        eff = inst()

        def effh(k):
            yield from k(1)
            yield from k(2)

        def main():
            yield eff()

        with pytest.raises(DoubleResumeError, match="continuation cannot be called twice"):
            execute(handler(eff, None, effh)(main))

    def test_first_resume_result_unaffected(self):
        eff = inst()
        seen: list[Any] = []

        def effh(k):
            first = yield from k(10)
            with pytest.raises(DoubleResumeError):
                k(20)
            return ("handled", first)

        def main():
            x = yield eff()
            seen.append(x)
            return x + 1

        assert execute(handler(eff, None, effh)(main)) == ("handled", 11)
        assert seen == [10]

    def test_consumed_flag(self):
        eff = inst()
        flags: list[bool] = []

        def effh(k):
            flags.append(k.consumed)
            result = yield from k()
            flags.append(k.consumed)
            return result

        def main():
            yield eff()
            return "done"

        assert execute(handler(eff, None, effh)(main)) == "done"
        assert flags == [False, True]

    def test_consumed_at_call_time(self):
        eff = inst()

        def effh(k):
            k(1)
            assert k.consumed
            with pytest.raises(DoubleResumeError):
                k(1)
            return "abandoned"

        def main():
            yield eff()

        assert execute(handler(eff, None, effh)(main)) == "abandoned"

    def test_throw_consumes(self):
        eff = inst()

        def effh(k):
            k.throw(ValueError("boom"))
            with pytest.raises(DoubleResumeError):
                k(1)
            return None

        def main():
            yield eff()

        execute(handler(eff, None, effh)(main))

    def test_racing_threads_resume_at_most_once(self):
        eff = inst()
        outcomes: list[str] = []
        lock = threading.Lock()

        def effh(k):
            barrier = threading.Barrier(8)

            def race() -> None:
                barrier.wait()
                try:
                    k(1)
                except DoubleResumeError:
                    outcome = "lost"
                else:
                    outcome = "won"
                with lock:
                    outcomes.append(outcome)

            threads = [threading.Thread(target=race) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
            return None

        def main():
            yield eff()

        execute(handler(eff, None, effh)(main))
        assert sorted(outcomes) == ["lost"] * 7 + ["won"]

    def test_rehandled_second_resume_fails(self):
        eff = inst()
        unrelated = inst()
        kinds: list[type] = []

        def effh(k):
            kinds.append(type(k))
            yield from k(1)
            yield from k(2)

        def main():
            yield eff()
            return "done"

        inner = handler(unrelated, None, lambda k: k())
        outer = handler(eff, None, effh)
        with pytest.raises(DoubleResumeError, match="continuation cannot be called twice"):
            execute(outer(lambda: inner(main)))
        assert kinds == [RehandledContinuation]

    def test_rehandled_resume_after_throw_fails(self):
        eff = inst()
        unrelated = inst()

        def effh(k):
            k.throw(ValueError("boom"))
            with pytest.raises(DoubleResumeError):
                k(1)
            return "abandoned"

        def main():
            yield eff()

        inner = handler(unrelated, None, lambda k: k())
        outer = handler(eff, None, effh)
        assert execute(outer(lambda: inner(main))) == "abandoned"


class TestThrow:
    def test_error_raised_at_yield_site(self):
        eff = inst()

        def effh(k):
            return (yield from k.throw(KeyError("missing")))

        def main():
            try:
                yield eff()
            except KeyError as exc:
                return f"recovered {exc.args[0]}"
            return "not reached"

        assert execute(handler(eff, None, effh)(main)) == "recovered missing"

    def test_uncaught_error_propagates(self):
        eff = inst()

        def effh(k):
            return (yield from k.throw(RuntimeError("fatal")))

        def main():
            yield eff()

        with pytest.raises(RuntimeError, match="fatal"):
            execute(handler(eff, None, effh)(main))

    def test_throw_through_resend(self):
        inner_eff = inst()
        outer_eff = inst()

        def outer_clause(k):
            return (yield from k.throw(ValueError("outer failure")))

        def main():
            try:
                yield outer_eff()
            except ValueError:
                return (yield inner_eff())
            return "not reached"

        inner = handler(inner_eff, None, lambda k: k("inner answer"))
        outer = handler(outer_eff, None, outer_clause)
        assert execute(outer(lambda: inner(main))) == "inner answer"


class TestContinuationKinds:
    def test_direct_continuation_for_own_effect(self):
        eff = inst()
        kinds: list[type] = []

        def effh(k):
            kinds.append(type(k))
            return (yield from k())

        def main():
            yield eff()

        execute(handler(eff, None, effh)(main))
        assert kinds == [Continuation]

    def test_rehandled_continuation_for_resent_effect(self):
        eff = inst()
        other = inst()
        kinds: list[type] = []

        def effh(k):
            kinds.append(type(k))
            return (yield from k())

        def main():
            yield eff()

        inner = handlers(None, {other: lambda k: k()})
        outer = handler(eff, None, effh)
        execute(outer(lambda: inner(main)))
        assert kinds == [RehandledContinuation]

    def test_repr_shows_state(self):
        eff = inst()
        reprs: list[str] = []

        def effh(k):
            reprs.append(repr(k))
            result = yield from k()
            reprs.append(repr(k))
            return result

        def main():
            yield eff()

        execute(handler(eff, None, effh)(main))
        assert "pending" in reprs[0]
        assert "consumed" in reprs[1]
        assert "main" in reprs[0]
