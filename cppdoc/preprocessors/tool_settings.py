import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from ..doc_config import DocConfig, split_list
from ..errors import ConfigurationError, LaunchError

COMPILER_PREFIX = "cppdoc.compiler"
BASE_NAME_PLACEHOLDER = '%'


class ToolSettings:
    """
    How to invoke the external preprocessor.

    options is the raw option string from the configuration: '%' stands for
    the base name of the file being preprocessed, and items are separated by
    commas or newlines.
    """

    def __init__(
        self,
        exec_name: str,
        options: str = '',
        path: str = '',
        use_pipe: bool = False,
        work_dir: Optional[Path] = None
    ):
        if not exec_name:
            raise ConfigurationError("No preprocessor executable configured")
        self.exec_name = exec_name
        self.options = options
        self.path = path
        self.use_pipe = use_pipe
        self.work_dir = Path(work_dir) if work_dir else Path.cwd()

    @classmethod
    def from_config(cls, config: DocConfig) -> 'ToolSettings':
        work_dir = config.get_platform_string(COMPILER_PREFIX, 'workDir', '')
        return cls(
            exec_name=config.get_platform_string(COMPILER_PREFIX, 'exec', ''),
            options=config.get_platform_string(COMPILER_PREFIX, 'options', ''),
            path=config.get_platform_string(COMPILER_PREFIX, 'path', ''),
            use_pipe=config.get_platform_bool(COMPILER_PREFIX, 'usePipe', False),
            work_dir=Path(work_dir) if work_dir else None
        )

    def build_args(self, source_file: Path) -> List[str]:
        source_file = Path(source_file)
        options = self.options.replace(BASE_NAME_PLACEHOLDER, source_file.stem)
        args = split_list(options)
        args.append(str(source_file))
        return args

    def build_environment(self) -> Dict[str, str]:
        """Copy of the process environment with the search path override appended."""
        env = dict(os.environ)
        if self.path:
            current = env.get('PATH', '')
            env['PATH'] = current + os.pathsep + self.path if current else self.path
        return env

    def resolve_executable(self, env: Dict[str, str], source_file: Path = None) -> str:
        executable = shutil.which(self.exec_name, path=env.get('PATH', ''))
        if executable is None:
            raise LaunchError(f"Preprocessor '{self.exec_name}' not found", source_file)
        return executable

    def output_path(self, source_file: Path) -> Path:
        """Where the temp-file transport expects the tool to write its output."""
        return self.work_dir / Path(source_file).with_suffix('.i').name

    def __repr__(self) -> str:
        return f"ToolSettings(exec={self.exec_name}, use_pipe={self.use_pipe})"
