"""Thread safety tests for shared translators and the default interpreter.

The interpreter, renderer and Translator claim to hold no per-call state.
These tests run real threads to catch races.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

from chemtex import Translator, translate
from chemtex.machine import default_interpreter

SOURCES = [
    ("H2O", "equation"),
    ("A + B -> C", "equation"),
    ("SO4^2-", "equation"),
    ("CuSO4*5H2O", "equation"),
    ("1.2e3 m", "unit"),
    ("123 kJ/mol", "unit"),
    ("Water: \\ce{H2O}.", "pass-through"),
]


class TestConcurrentTranslation:
    def test_shared_translator(self) -> None:
        """One Translator used from many threads gives the serial results."""
        tex = Translator()
        expected = {source: tex(source, mode) for source, mode in SOURCES}

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = {
                pool.submit(tex, source, mode): source for source, mode in SOURCES * 20
            }
            for future in as_completed(futures):
                assert future.result() == expected[futures[future]]

    def test_translators_with_different_config(self) -> None:
        """Config set by one thread's translator never shows in another's output."""
        wrapped = Translator()
        bare = Translator(outer_braces=False)
        errors: list[str] = []
        barrier = threading.Barrier(8)

        def worker(tex: Translator, expect_braces: bool) -> None:
            barrier.wait()
            for _ in range(50):
                out = tex("H", "equation")
                if out.startswith("{") is not expect_braces:
                    errors.append(out)

        threads = [
            threading.Thread(target=worker, args=(wrapped if i % 2 else bare, bool(i % 2)))
            for i in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []

    def test_default_interpreter_is_shared(self) -> None:
        seen: list[object] = []

        def worker() -> None:
            seen.append(default_interpreter())
            translate("H2O", "equation")

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(interp is default_interpreter() for interp in seen)
