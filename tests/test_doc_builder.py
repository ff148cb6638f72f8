import json
import sys
import pytest
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch
from cppdoc import logger as cppdoc_logger
from cppdoc.build.doc_builder import DocBuilder
from cppdoc.doc_config import DocConfig
from cppdoc.errors import ConfigurationError
from cppdoc.renderers.base_renderer import RenderOptions

ECHO_SCRIPT = """
import sys
with open(sys.argv[-1], 'rb') as f:
    sys.stdout.buffer.write(f.read())
"""


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "derived.h").write_text("/// Does things.\nclass Derived : public Base { public: void run(); };\n")
    (src / "base.h").write_text("class Base { public: void start(); };\n")
    (src / "skip_test.h").write_text("class Skipped {};\n")
    script = tmp_path / "echo_pp.py"
    script.write_text(ECHO_SCRIPT)
    return tmp_path


def make_config(project: Path, drop=(), **overrides) -> DocConfig:
    values = {
        "cppdoc.files.include": [str(project / "src" / "*.h")],
        "cppdoc.files.exclude": ["*_test.h"],
        "cppdoc.compiler.exec": sys.executable,
        "cppdoc.compiler.options": str(project / "echo_pp.py"),
        "cppdoc.compiler.usePipe": True,
        "cppdoc.compiler.workDir": str(project),
        "cppdoc.output": str(project / "doc"),
    }
    values.update(overrides)
    for key in drop:
        del values[key]
    return DocConfig(values)


def read_index(project: Path) -> dict:
    with open(project / "doc" / "index.json", encoding="utf-8") as f:
        return json.load(f)


def mock_renderer(supports_search=False) -> Mock:
    renderer = Mock()
    renderer.get_name.return_value = "Mock"
    renderer.supports_search_index.return_value = supports_search
    return renderer


class TestDocBuilder:
    def test_end_to_end_build(self, project):
        stats = DocBuilder(make_config(project)).run()

        assert stats.error_count == 0
        assert stats.files_attempted == 2
        symbols = {s["qualified_name"]: s for s in read_index(project)["symbols"]}
        assert "Skipped" not in symbols
        assert symbols["Derived"]["doc"] == "Does things."
        assert symbols["Derived"]["bases"] == [{"name": "Base", "resolved": "Base"}]
        assert symbols["Base"]["derived"] == ["Derived"]
        assert symbols["Derived"]["inherited_members"] == ["Base::start()"]

    def test_temp_file_transport_end_to_end(self, project):
        (project / "write_i.py").write_text(
            "import sys\n"
            "stem, source = sys.argv[1], sys.argv[2]\n"
            "with open(source, 'rb') as src, open(stem + '.i', 'wb') as out:\n"
            "    out.write(src.read())\n"
        )
        config = make_config(project, **{
            "cppdoc.compiler.options": f"{project / 'write_i.py'},%",
            "cppdoc.compiler.usePipe": False,
        })

        stats = DocBuilder(config).run()

        assert stats.error_count == 0
        assert list(project.glob("*.i")) == []
        assert "Derived" in [s["qualified_name"] for s in read_index(project)["symbols"]]

    def test_missing_tool_counts_every_file_and_still_writes(self, project):
        config = make_config(project, **{"cppdoc.compiler.exec": "cppdoc-no-such-tool"})
        stats = DocBuilder(config).run()

        assert stats.error_count == 2
        assert stats.errors_by_kind() == {"launch": 2}
        assert (project / "doc" / "index.json").exists()

    def test_error_summary_lists_kinds_and_failed_files(self, project):
        config = make_config(project, **{"cppdoc.compiler.exec": "cppdoc-no-such-tool"})
        with patch.object(cppdoc_logger, "info") as info, patch.object(cppdoc_logger, "debug") as debug:
            DocBuilder(config).run()

        info_messages = [c.args[0] for c in info.call_args_list]
        assert "2 errors." in info_messages
        assert "Errors by kind: launch: 2" in info_messages
        debug_messages = [c.args[0] for c in debug.call_args_list]
        assert f"Failed: {project / 'src' / 'base.h'}" in debug_messages
        assert f"Failed: {project / 'src' / 'derived.h'}" in debug_messages

    def test_clean_build_logs_no_error_summary(self, project):
        with patch.object(cppdoc_logger, "info") as info:
            DocBuilder(make_config(project)).run()

        info_messages = [c.args[0] for c in info.call_args_list]
        assert "0 errors." in info_messages
        assert not any(m.startswith("Errors by kind") for m in info_messages)

    def test_missing_include_is_a_configuration_error(self, project):
        config = make_config(project, drop=("cppdoc.files.include",))
        renderer = mock_renderer()

        with pytest.raises(ConfigurationError):
            DocBuilder(config, renderer=renderer).run()

        renderer.write.assert_not_called()

    @pytest.mark.parametrize("key", ["cppdoc.prettifyCode", "cppdoc.searchIndex"])
    def test_bad_output_option_fails_before_any_file_is_parsed(self, project, key):
        config = make_config(project, **{key: "maybe"})
        preprocessor = Mock()
        renderer = mock_renderer()

        with pytest.raises(ConfigurationError):
            DocBuilder(config, renderer=renderer, preprocessor=preprocessor).run()

        preprocessor.run.assert_not_called()
        renderer.write.assert_not_called()

    def test_missing_compiler_is_a_configuration_error(self, project):
        config = DocConfig({"cppdoc.files.include": [str(project / "src" / "*.h")]})
        with pytest.raises(ConfigurationError):
            DocBuilder(config).run()

    def test_sets_date_and_year(self, project):
        config = make_config(project)
        DocBuilder(config).run()
        assert config.get_string("cppdoc.year") == str(datetime.now().year)
        assert len(config.get_string("cppdoc.date")) == 10

    def test_default_output_directory(self, project, monkeypatch):
        monkeypatch.chdir(project)
        config = make_config(project, drop=("cppdoc.output",))
        DocBuilder(config).run()
        assert (project / "doc" / "index.json").exists()

    def test_unsupported_search_index_is_disabled(self, project):
        renderer = mock_renderer(supports_search=False)
        DocBuilder(make_config(project), renderer=renderer, search_index=True).run()

        options = renderer.write.call_args[0][2]
        assert isinstance(options, RenderOptions)
        assert options.search_index is False

    def test_search_index_from_config(self, project):
        renderer = mock_renderer(supports_search=True)
        config = make_config(project, **{"cppdoc.searchIndex": "true"})
        DocBuilder(config, renderer=renderer).run()
        assert renderer.write.call_args[0][2].search_index is True

    def test_prettify_option_passed_to_renderer(self, project):
        renderer = mock_renderer()
        config = make_config(project, **{"cppdoc.prettifyCode": True})
        DocBuilder(config, renderer=renderer).run()
        assert renderer.write.call_args[0][2].prettify is True

    def test_eclipse_toc_written_on_request(self, project):
        DocBuilder(make_config(project), eclipse_toc=True).run()
        assert (project / "doc" / "toc.xml").exists()

    def test_eclipse_toc_not_written_by_default(self, project):
        renderer = mock_renderer()
        DocBuilder(make_config(project), renderer=renderer).run()
        renderer.write_eclipse_toc.assert_not_called()

    def test_pages_are_added(self, project):
        pages = project / "pages"
        pages.mkdir()
        (pages / "intro.page").write_text("Introduction")
        config = make_config(project, **{"cppdoc.pages": [str(pages / "*.page")]})

        DocBuilder(config).run()

        assert read_index(project)["pages"] == ["pages/intro.page"]
        assert (project / "doc" / "pages" / "intro.page").read_text() == "Introduction"

    def test_render_failure_is_reported_not_raised(self, project, capsys):
        renderer = mock_renderer()
        renderer.write.side_effect = OSError("disk full")

        stats = DocBuilder(make_config(project), renderer=renderer).run()

        assert stats.error_count == 0
        assert "disk full" in capsys.readouterr().err

    def test_elapsed_time_recorded(self, project):
        stats = DocBuilder(make_config(project)).run()
        assert stats.elapsed > 0

    def test_fixup_requires_parsed_files(self, project):
        builder = DocBuilder(make_config(project))
        with pytest.raises(RuntimeError):
            builder.fixup()

    def test_injected_preprocessor_is_used(self, project):
        preprocessor = Mock()
        preprocessor.run.side_effect = RuntimeError("not used for real")
        stats = DocBuilder(make_config(project), preprocessor=preprocessor).run()

        assert preprocessor.run.call_count == 2
        assert stats.errors_by_kind() == {"unexpected": 2}
