import io
import subprocess
import sys
import pytest
from pathlib import Path
from unittest.mock import Mock
from cppdoc.build.parse_coordinator import ParseCoordinator
from cppdoc.build_stats import FileStatus
from cppdoc.errors import LaunchError, OpenFileError, ParseError
from cppdoc.parsers.declaration_parser import DeclarationParser
from cppdoc.parsers.symbol_table import SymbolTable
from cppdoc.preprocessors import ProcessPreprocessor, ToolSettings


class FakeJob:
    def __init__(self, text: str):
        self.stream = io.BytesIO(text.encode("utf-8"))
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def is_readable(self):
        return not self.stream.closed

    def close(self):
        self.closed = True


class FakePreprocessor:
    """Serves canned preprocessor output per file name; raises for names in failures."""

    def __init__(self, outputs, failures=None):
        self.outputs = outputs
        self.failures = failures or {}
        self.jobs = []
        self.calls = []

    def run(self, source_file: Path):
        self.calls.append(source_file.name)
        if source_file.name in self.failures:
            raise self.failures[source_file.name]
        job = FakeJob(self.outputs[source_file.name])
        self.jobs.append(job)
        return job


class TestParseCoordinator:
    def test_all_files_parsed_into_one_table(self):
        preprocessor = FakePreprocessor({"a.cpp": "class A {};", "b.cpp": "class B {};"})
        table = SymbolTable()
        stats = ParseCoordinator(preprocessor, DeclarationParser(), table).run([Path("b.cpp"), Path("a.cpp")])

        assert "A" in table
        assert "B" in table
        assert stats.files_attempted == 2
        assert stats.error_count == 0

    def test_files_processed_in_sorted_order(self):
        preprocessor = FakePreprocessor({"a.cpp": "", "b.cpp": "", "c.cpp": ""})
        ParseCoordinator(preprocessor, DeclarationParser(), SymbolTable()).run(
            [Path("c.cpp"), Path("a.cpp"), Path("b.cpp")])
        assert preprocessor.calls == ["a.cpp", "b.cpp", "c.cpp"]

    def test_missing_tool_for_one_file_is_counted_and_rest_processed(self):
        preprocessor = FakePreprocessor(
            {"a.cpp": "class A {};", "c.cpp": "class C {};"},
            failures={"b.cpp": LaunchError("Preprocessor 'cc' not found", Path("b.cpp"))}
        )
        table = SymbolTable()
        stats = ParseCoordinator(preprocessor, DeclarationParser(), table).run(
            [Path("a.cpp"), Path("b.cpp"), Path("c.cpp")])

        assert stats.error_count == 1
        assert stats.files_attempted == 3
        assert stats.failed_files() == [Path("b.cpp")]
        assert stats.errors_by_kind() == {"launch": 1}
        assert "A" in table
        assert "C" in table

    def test_parse_error_is_counted_and_job_closed(self):
        preprocessor = FakePreprocessor({"bad.cpp": "int a;\n}", "good.cpp": "int b;"})
        table = SymbolTable()
        stats = ParseCoordinator(preprocessor, DeclarationParser(), table).run(
            [Path("bad.cpp"), Path("good.cpp")])

        assert stats.error_count == 1
        assert stats.errors_by_kind() == {"parse": 1}
        assert all(job.closed for job in preprocessor.jobs)
        assert "b" in table

    def test_open_error_is_counted(self):
        preprocessor = FakePreprocessor(
            {}, failures={"a.cpp": OpenFileError("cannot read from preprocessor", Path("a.cpp"))})
        stats = ParseCoordinator(preprocessor, DeclarationParser(), SymbolTable()).run([Path("a.cpp")])
        assert stats.file_results[0].status == FileStatus.FAILED
        assert stats.file_results[0].error_kind == "open"

    def test_unreadable_job_is_an_open_error(self):
        preprocessor = FakePreprocessor({"a.cpp": "int a;"})
        job = FakeJob("")
        job.stream.close()
        preprocessor.run = Mock(return_value=job)

        stats = ParseCoordinator(preprocessor, DeclarationParser(), SymbolTable()).run([Path("a.cpp")])

        assert stats.errors_by_kind() == {"open": 1}
        assert job.closed

    def test_unexpected_exception_is_counted(self):
        parser = Mock()
        parser.parse.side_effect = KeyError("boom")
        preprocessor = FakePreprocessor({"a.cpp": "", "b.cpp": ""})

        stats = ParseCoordinator(preprocessor, parser, SymbolTable()).run([Path("a.cpp"), Path("b.cpp")])

        assert stats.error_count == 2
        assert stats.errors_by_kind() == {"unexpected": 2}
        assert all(job.closed for job in preprocessor.jobs)

    def test_parse_file_returns_parsed_result(self):
        preprocessor = FakePreprocessor({"a.cpp": "int a;"})
        coordinator = ParseCoordinator(preprocessor, DeclarationParser(), SymbolTable())
        result = coordinator.parse_file(Path("a.cpp"))
        assert result.status == FileStatus.PARSED
        assert not result.failed

    def test_error_without_file_context(self):
        parser = Mock()
        parser.parse.side_effect = ParseError("bad token")
        coordinator = ParseCoordinator(FakePreprocessor({"a.cpp": ""}), parser, SymbolTable())
        result = coordinator.parse_file(Path("a.cpp"))
        assert result.error_kind == "parse"
        assert result.message == "bad token"


ECHO_SCRIPT = """
import sys
with open(sys.argv[-1], 'rb') as f:
    sys.stdout.buffer.write(f.read())
"""

WRITE_I_FILE_SCRIPT = """
import sys
stem, source = sys.argv[1], sys.argv[2]
if stem.startswith('missing'):
    sys.exit(0)
with open(source, 'rb') as src, open(stem + '.i', 'wb') as out:
    out.write(src.read())
"""

# several times the size of an OS pipe buffer
LARGE_SOURCE = "class Filler {};\n" + "// filler line\n" * 40000


class RecordingPreprocessor:
    """ProcessPreprocessor that keeps every job it hands out."""

    def __init__(self, settings: ToolSettings):
        self.preprocessor = ProcessPreprocessor(settings)
        self.jobs = []

    def run(self, source_file: Path):
        job = self.preprocessor.run(source_file)
        self.jobs.append(job)
        return job


def read_then_fail_for_bad(table, source_file, stream):
    stream.read(4096)
    if source_file.name.startswith("bad"):
        raise ParseError("unexpected token", source_file, 1)


@pytest.fixture
def launched(monkeypatch):
    """Every process started by a transport."""
    processes = []
    real_popen = subprocess.Popen

    def recording_popen(*args, **kwargs):
        process = real_popen(*args, **kwargs)
        processes.append(process)
        return process

    monkeypatch.setattr(subprocess, "Popen", recording_popen)
    return processes


class TestParseCoordinatorWithRealTool:
    def test_pipe_jobs_are_reaped_when_parser_fails_partway(self, tmp_path, launched):
        script = tmp_path / "echo_pp.py"
        script.write_text(ECHO_SCRIPT)
        sources = []
        for name in ("bad_a.cpp", "good.cpp", "bad_b.cpp"):
            source = tmp_path / name
            source.write_text(LARGE_SOURCE)
            sources.append(source)
        preprocessor = RecordingPreprocessor(
            ToolSettings(sys.executable, options=str(script), use_pipe=True, work_dir=tmp_path))
        parser = Mock()
        parser.parse.side_effect = read_then_fail_for_bad

        stats = ParseCoordinator(preprocessor, parser, SymbolTable()).run(sources)

        assert stats.files_attempted == 3
        assert stats.error_count == 2
        assert stats.errors_by_kind() == {"parse": 2}
        assert len(preprocessor.jobs) == 3
        for job in preprocessor.jobs:
            assert job.closed
            assert job.stream.closed
            assert job.process.returncode == 0
        assert len(launched) == 3
        assert all(process.returncode is not None for process in launched)

    def test_temp_file_jobs_clean_up_with_mixed_failures(self, tmp_path, launched):
        script = tmp_path / "write_i.py"
        script.write_text(WRITE_I_FILE_SCRIPT)
        work_dir = tmp_path / "work"
        work_dir.mkdir()
        src = tmp_path / "src"
        src.mkdir()
        sources = []
        for name in ("bad.cpp", "good.cpp", "missing.cpp"):
            source = src / name
            source.write_text(LARGE_SOURCE)
            sources.append(source)
        preprocessor = RecordingPreprocessor(
            ToolSettings(sys.executable, options=f"{script},%", use_pipe=False, work_dir=work_dir))
        parser = Mock()
        parser.parse.side_effect = read_then_fail_for_bad

        stats = ParseCoordinator(preprocessor, parser, SymbolTable()).run(sources)

        assert stats.files_attempted == 3
        assert stats.errors_by_kind() == {"open": 1, "parse": 1}
        assert stats.failed_files() == [src / "bad.cpp", src / "missing.cpp"]
        assert list(work_dir.glob("*.i")) == []
        assert len(preprocessor.jobs) == 2
        assert all(job.closed and job.stream.closed for job in preprocessor.jobs)
        assert len(launched) == 3
        assert all(process.returncode is not None for process in launched)
