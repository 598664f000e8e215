import logging

import pytest

from mediapoly.config import DEFAULTS, GENERATED_NAME, default_options
from mediapoly.css.compiler import CompileError, CSSCompiler, Stylesheet
from mediapoly.reactor import MediaQuery, State
from mediapoly.surface import FileStylesheet, InlineStylesheet, Surface

RED_BLUE = "@media (min-width: 400px) { .a{color:red;} }\n@media (max-width: 399px) { .a{color:blue;} }"


class RecordingCompiler:
    def __init__(self):
        self.sources: list[str] = []

    def compile(self, source: str) -> InlineStylesheet:
        self.sources.append(source)
        return InlineStylesheet(source)


class FailingCompiler:
    def compile(self, source: str):
        raise CompileError("importer is unavailable")


def make_surface(width: float, *sources: str, height: float = 300) -> Surface:
    base = InlineStylesheet("@media (min-width: 1px) { .base{} }", name="base")
    return Surface(width, height, [base, *(InlineStylesheet(source) for source in sources)])


def generated(surface: Surface) -> list:
    return [stylesheet for stylesheet in surface.stylesheets if stylesheet.name == GENERATED_NAME]


class TestFirstUpdate:
    def test_loads_every_stylesheet_but_the_base(self):
        query = MediaQuery(RecordingCompiler())
        surface = make_surface(500, RED_BLUE, "@media (min-width: 10px) { .b{} }")

        assert query.state is State.Uninitialized
        query.on_update(surface)

        assert query.state is State.Tracking
        assert query.previous == (500, 300)
        assert [rule.body for rule in query.store] == [".a{color:red;}", ".a{color:blue;}", ".b{}"]

    def test_base_stylesheets_option(self):
        query = MediaQuery(RecordingCompiler(), options={"base_stylesheets": 0})
        query.on_update(make_surface(500, RED_BLUE))

        assert [rule.body for rule in query.store][0] == ".base{}"

    def test_only_base_stylesheet(self):
        compiler = RecordingCompiler()
        query = MediaQuery(compiler)
        surface = make_surface(500)

        query.on_update(surface)

        assert len(query.store) == 0
        assert compiler.sources == []
        assert generated(surface) == []

    def test_unreadable_stylesheet_is_skipped(self, tmp_path, caplog: pytest.LogCaptureFixture):
        path = tmp_path / "broken.css"
        path.write_bytes(b"\xff\xfe@media (min-width: 1px) { .broken{} }")
        compiler = RecordingCompiler()
        query = MediaQuery(compiler)
        surface = make_surface(500)
        surface.stylesheets.extend([FileStylesheet(path), InlineStylesheet(RED_BLUE)])

        with caplog.at_level(logging.WARNING, logger="mediapoly.reactor"):
            query.on_update(surface)

        assert query.state is State.Tracking
        assert [rule.body for rule in query.store] == [".a{color:red;}", ".a{color:blue;}"]
        assert compiler.sources == [".a{color:red;}\n"]
        assert "broken.css" in caplog.text

    def test_missing_file_is_skipped(self, tmp_path):
        query = MediaQuery(RecordingCompiler())
        surface = make_surface(500)
        surface.stylesheets.extend([FileStylesheet(tmp_path / "missing.css"), InlineStylesheet(RED_BLUE)])

        query.on_update(surface)

        assert len(query.store) == 2

    def test_rules_are_loaded_once(self):
        query = MediaQuery(RecordingCompiler())
        surface = make_surface(500, RED_BLUE)
        query.on_update(surface)

        surface.stylesheets[1].source += "\n@media (min-width: 1px) { .late{} }"
        surface.resize(600)
        query.on_update(surface)
        query.on_update(surface)

        assert len(query.store) == 2


class TestEndToEnd:
    @pytest.mark.parametrize(
        "width, body",
        [(500, ".a{color:red;}\n"), (400, ".a{color:red;}\n"), (200, ".a{color:blue;}\n"), (398, ".a{color:blue;}\n")],
    )
    def test_generated_body(self, width, body):
        compiler = RecordingCompiler()
        surface = make_surface(width, RED_BLUE)

        MediaQuery(compiler).on_update(surface)

        assert compiler.sources == [body]
        assert surface.find(GENERATED_NAME).read() == body

    def test_gap_between_bounds_attaches_nothing(self):
        compiler = RecordingCompiler()
        surface = make_surface(399, RED_BLUE)

        MediaQuery(compiler).on_update(surface)

        assert compiler.sources == []
        assert generated(surface) == []

    def test_compiled_stylesheet(self):
        surface = make_surface(500, RED_BLUE)

        MediaQuery(CSSCompiler()).on_update(surface)

        (stylesheet,) = generated(surface)
        assert isinstance(stylesheet, Stylesheet)
        assert stylesheet.non_editable is True
        assert stylesheet.css_rules[0].selector == ".a"
        assert stylesheet.css_rules[0].declarations[0].value == "red"

    def test_comma_branches_are_emitted_per_match(self):
        compiler = RecordingCompiler()
        surface = make_surface(300, "@media (min-width: 100px), (min-width: 200px), (min-width: 900px) { .a{} }")

        MediaQuery(compiler).on_update(surface)

        assert compiler.sources == [".a{}\n.a{}\n"]

    @pytest.mark.parametrize("rem, sources", [(12, [".a{}\n"]), (14, [])])
    def test_rem_option(self, rem, sources):
        compiler = RecordingCompiler()
        surface = make_surface(320, "@media (min-width: 25rem) { .a{} }")

        MediaQuery(compiler, options={"rem": rem}).on_update(surface)

        assert compiler.sources == sources


class TestDebounce:
    def test_one_apply_once_size_settles(self):
        compiler = RecordingCompiler()
        query = MediaQuery(compiler)
        surface = make_surface(100, RED_BLUE)
        query.on_update(surface)
        assert compiler.sources == [".a{color:blue;}\n"]

        for width in (200, 300, 400, 500):
            surface.resize(width)
            query.on_update(surface)
            assert query.resizing is True
        assert len(compiler.sources) == 1

        query.on_update(surface)
        assert compiler.sources[1:] == [".a{color:red;}\n"]
        assert query.resizing is False

        query.on_update(surface)
        query.on_update(surface)
        assert len(compiler.sources) == 2

    def test_height_change_also_settles(self):
        compiler = RecordingCompiler()
        query = MediaQuery(compiler)
        surface = make_surface(500, RED_BLUE)
        query.on_update(surface)

        surface.resize(height=10)
        query.on_update(surface)
        query.on_update(surface)

        assert len(compiler.sources) == 2
        assert len(generated(surface)) == 1


class TestApply:
    def test_repeated_apply_is_idempotent(self):
        compiler = RecordingCompiler()
        query = MediaQuery(compiler)
        surface = make_surface(500, RED_BLUE)
        query.on_update(surface)

        query.apply(surface)
        query.apply(surface)

        assert compiler.sources[0] == compiler.sources[1] == compiler.sources[2]
        assert len(generated(surface)) == 1
        assert surface.find(GENERATED_NAME).read() == compiler.sources[0]

    def test_previous_stylesheet_is_removed_when_nothing_matches(self):
        query = MediaQuery(RecordingCompiler())
        surface = make_surface(500, "@media (min-width: 400px) { .a{} }")
        query.on_update(surface)
        assert len(generated(surface)) == 1

        surface.resize(100)
        query.on_update(surface)
        query.on_update(surface)

        assert generated(surface) == []

    def test_missing_compiler(self, caplog: pytest.LogCaptureFixture):
        surface = make_surface(500, RED_BLUE)

        with caplog.at_level(logging.WARNING, logger="mediapoly.reactor"):
            result = MediaQuery(None).apply(surface)
            MediaQuery(None).on_update(surface)

        assert result is None
        assert generated(surface) == []
        assert "No stylesheet compiler" in caplog.text

    def test_compile_failure(self, caplog: pytest.LogCaptureFixture):
        query = MediaQuery(FailingCompiler())
        surface = make_surface(500, RED_BLUE)

        with caplog.at_level(logging.WARNING, logger="mediapoly.reactor"):
            query.on_update(surface)

        assert generated(surface) == []
        assert "importer is unavailable" in caplog.text

    def test_any_compiler_error_is_a_failed_compile(self, caplog: pytest.LogCaptureFixture):
        class HostCompiler:
            def compile(self, source: str):
                raise RuntimeError("host importer crashed")

        query = MediaQuery(HostCompiler())
        surface = make_surface(500, RED_BLUE)

        with caplog.at_level(logging.WARNING, logger="mediapoly.reactor"):
            query.on_update(surface)
            result = query.apply(surface)

        assert result is None
        assert generated(surface) == []
        assert "host importer crashed" in caplog.text

    def test_malformed_width_skips_the_cycle(self, caplog: pytest.LogCaptureFixture):
        query = MediaQuery(RecordingCompiler())
        surface = make_surface(500, "@media (min-width: 1.2.3px) { .bad{} }\n" + RED_BLUE)
        previous = InlineStylesheet(".previous{}")
        surface.attach(previous, GENERATED_NAME)

        with caplog.at_level(logging.WARNING, logger="mediapoly.reactor"):
            query.on_update(surface)

        assert query.state is State.Tracking
        assert generated(surface) == [previous]
        assert "1.2.3px" in caplog.text

        surface.resize(600)
        query.on_update(surface)
        query.on_update(surface)
        assert generated(surface) == [previous]

    def test_info_log_on_apply(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.INFO, logger="mediapoly.reactor"):
            MediaQuery(RecordingCompiler()).on_update(make_surface(500, RED_BLUE))

        assert "Applied 1 media rule(s) at width 500" in caplog.text


class TestOptions:
    def test_defaults(self):
        options = default_options()

        assert options == DEFAULTS
        assert options["rem"] == 12.0
        assert options["base_stylesheets"] == 1

    def test_overrides_are_kept(self):
        origin = {"rem": 16.0}
        options = default_options(origin)

        assert options["rem"] == 16.0
        assert options["generated_name"] == GENERATED_NAME
        assert origin == {"rem": 16.0}

    def test_generated_name_option(self):
        query = MediaQuery(RecordingCompiler(), options={"generated_name": "custom.css"})
        surface = make_surface(500, RED_BLUE)
        query.on_update(surface)

        assert query.generated_name == "custom.css"
        assert surface.find("custom.css") is not None
        assert generated(surface) == []
