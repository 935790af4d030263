from __future__ import annotations

from handleff import combine_handlers, execute, handler, handlers, inst


def _tagging_handler(eff, tag):
    return handler(eff, lambda v: f"{v}|{tag}", lambda k: k(tag))


class TestCombineHandlers:
    def test_empty_is_identity(self):
        def main():
            return "unchanged"
            yield

        assert execute(combine_handlers()(main)) == "unchanged"

    def test_single_handler(self):
        eff = inst()

        def main():
            return (yield eff())

        assert execute(combine_handlers(_tagging_handler(eff, "h"))(main)) == "h|h"

    def test_equals_manual_nesting(self):
        a, b, c = inst("a"), inst("b"), inst("c")
        h1 = _tagging_handler(a, "h1")
        h2 = _tagging_handler(b, "h2")
        h3 = _tagging_handler(c, "h3")

        def main():
            x = yield a()
            y = yield b()
            z = yield c()
            return f"{x},{y},{z}"

        combined = execute(combine_handlers(h1, h2, h3)(main))
        nested = execute(h1(lambda: h2(lambda: h3(main))))
        assert combined == nested == "h1,h2,h3|h3|h2|h1"

    def test_first_argument_is_outermost(self):
        eff = inst()

        def main():
            return (yield eff())

        outer = handler(eff, None, lambda k: k("outer"))
        inner = handler(eff, None, lambda k: k("inner"))
        assert execute(combine_handlers(outer, inner)(main)) == "inner"

    def test_combined_is_reusable_wrap(self):
        eff = inst()
        wrap = combine_handlers(handlers(lambda v: v + 1, {}), handler(eff, None, lambda k: k(1)))

        def main():
            return (yield eff())

        assert execute(wrap(main)) == 2
        assert execute(wrap(main)) == 2

    def test_nested_combination(self):
        a, b = inst("a"), inst("b")
        h1 = _tagging_handler(a, "h1")
        h2 = _tagging_handler(b, "h2")

        def main():
            x = yield a()
            y = yield b()
            return x + y

        flat = execute(combine_handlers(h1, h2)(main))
        grouped = execute(combine_handlers(combine_handlers(h1), combine_handlers(h2))(main))
        assert flat == grouped
