"""
Preprocessor for configured dotfiles

Transforms every configured source file into its preprocessed form and
links the target to it.
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..config import appsettings
from ..models.config import Config, FileConfig, RawConfig
from .env import expand, path_expand
from .errors import (
    ConfigError,
    LinkError,
    OutputWriteError,
    PreprocessorError,
    SourceReadError,
    TargetExistsError,
)
from .evaluator import Evaluator, Resolver
from .log import LOG
from .parser import Parser
from .prompt import Prompter


def config_load(config_path: Path) -> Config:
    """
    Load and normalize the configuration file

    Args:
        config_path: Path of the TOML configuration file

    Returns:
        Config with the defaults filled into every file configuration

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or does not
                     follow the configuration schema
    """
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to load configuration file {str(config_path)!r}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse configuration file {str(config_path)!r}: {e}") from e

    try:
        raw = RawConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file {str(config_path)!r}: {e}") from e

    return Config.raw_normalize(raw)


class Preprocessor:
    """
    Preprocesses the files of a configuration

    Responsibilities:
    - Read source files
    - Evaluate directive lines and drop the lines that do not survive
    - Replace escaped substitution keys
    - Write preprocessed files
    - Link targets to the preprocessed files
    """

    def __init__(
        self,
        config: Config,
        root: str,
        output_dir: str,
        resolver: Optional[Resolver] = None,
        prompter: Optional[Prompter] = None,
        link: bool = True,
        strict: Optional[bool] = None,
    ) -> None:
        """
        Initialize preprocessor

        Args:
            config: Normalized configuration
            root: Directory relative source and target paths are resolved against
                  (the configuration file's directory)
            output_dir: Directory receiving the preprocessed files
            resolver: Variable resolver (default: env.expand)
            prompter: Source of answers for ASK blocks (default: terminal)
            link: Create target links after preprocessing
            strict: Abort on the first failing file (default: settings)
        """
        self.config = config
        self.root = Path(root)
        self.output_dir = Path(output_dir)
        self.resolver: Resolver = resolver or expand
        self.prompter = prompter
        self.link = link
        self.strict = appsettings.strict_mode if strict is None else strict

    def run(self) -> Dict[str, Any]:
        """
        Preprocess (and link) all configured files

        A failing file is reported and skipped, unless in strict mode where
        the error is raised.

        Returns:
            dict with run results and statistics
        """
        processed: List[str] = []
        linked: List[str] = []
        failed: List[str] = []

        for fc in self.config.file_configurations:
            try:
                output_path = self.file_preprocess(fc)
                processed.append(str(output_path))
                if self.link:
                    linked.append(str(self.link_create(fc)))
            except PreprocessorError as e:
                LOG(f"{self.sourcePath_get(fc)}: {e}", level=0, severity="ERROR")
                failed.append(str(self.sourcePath_get(fc)))
                if self.strict:
                    raise

        return {
            'status': not failed,
            'processed': processed,
            'linked': linked,
            'failed': failed,
        }

    def sourcePath_get(self, fc: FileConfig) -> Path:
        """
        Source path of a file configuration

        Environment variables are expanded before deciding whether the path
        is relative (to the root) or absolute.
        """
        return self.root / path_expand(fc.source)

    def targetPath_get(self, fc: FileConfig) -> Path:
        """Target path of a file configuration, see sourcePath_get"""
        return self.root / path_expand(fc.target)

    def outputPath_get(self, fc: FileConfig) -> Path:
        """
        Path of the preprocessed file

        Mirrors the source path relative to the root inside the output
        directory; sources outside the root keep only their file name.
        """
        source_path = self.sourcePath_get(fc)
        try:
            relative = source_path.resolve().relative_to(self.root.resolve())
        except ValueError:
            relative = Path(source_path.name)
        return appsettings.preprocessedPath_make(self.output_dir, relative)

    def file_preprocess(self, fc: FileConfig) -> Path:
        """
        Preprocess one file

        1) Evaluate preprocessor instructions.
        2) Replace substitutions.
        3) Write the preprocessed file.

        Returns:
            Path of the written file
        """
        source_path = self.sourcePath_get(fc)
        LOG(f"Preprocessing {source_path}", level=1)

        try:
            content = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(source_path, e) from e
        LOG(f"Read {len(content)} characters from {source_path.name}", level=2)

        content = self.instructions_preprocess(fc, content)
        content = self.substitutions_preprocess(fc, content)

        output_path = self.outputPath_get(fc)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(output_path, e) from e
        LOG(f"Wrote {output_path}", level=2)
        return output_path

    def instructions_preprocess(self, fc: FileConfig, content: str) -> str:
        """
        Evaluate the directive lines of a file

        Files without a prefix are returned unchanged. Every file gets its
        own Evaluator, hence its own answer cache.

        Returns:
            Content without the lines to skip (and without the directive lines
            themselves when remove_instructions is set)
        """
        if fc.prefix is None:
            LOG("No prefix defined, no instructions will be evaluated", level=2)
            return content

        parser = Parser(content, prefix=fc.prefix)
        directives = parser.parse()
        LOG(f"Found {len(directives)} instructions", level=2)

        evaluator = Evaluator(resolver=self.resolver, prompter=self.prompter)
        skips = set(evaluator.evaluate_lines(directives))

        if fc.remove_instructions:
            skips.update(located.line for located in directives)

        if not skips:
            return content

        LOG(f"Skipping lines {sorted(line + 1 for line in skips)}", level=3)
        remaining = [
            line for line_number, line in enumerate(parser.lines) if line_number not in skips
        ]
        result = "\n".join(remaining)
        if remaining and content.endswith("\n"):
            result += "\n"
        return result

    def substitutions_preprocess(self, fc: FileConfig, content: str) -> str:
        """
        Replace escaped substitution keys

        Assuming the escapes `{{{` and `}}}`, every `{{{KEY}}}` is replaced by
        the configured substitution for KEY, or by the expansion of KEY when
        no substitution is configured (so `{{{$HOME}}}` works). The content is
        unaltered when no escapes are defined.
        """
        if fc.escape is None:
            LOG("No escape sequences defined, no substitution will be made", level=2)
            return content

        substitutions = self.config.substitutions
        regex = fc.escape.regex_make()

        def key_replace(found: Any) -> str:
            key = found.group(1)
            if key in substitutions:
                return substitutions[key]
            return self.resolver(key)

        return regex.sub(key_replace, content)

    def link_create(self, fc: FileConfig) -> Path:
        """
        Create a symbolic link from the target to the preprocessed file

        An existing link at the target is replaced; any other existing file
        is left alone and reported.

        Returns:
            The target path
        """
        target_path = self.targetPath_get(fc)
        output_path = self.outputPath_get(fc)

        if target_path.is_symlink():
            try:
                target_path.unlink()
            except OSError as e:
                raise LinkError(output_path, target_path, e) from e
        elif target_path.exists():
            raise TargetExistsError(target_path)

        try:
            link_source = output_path.resolve(strict=True)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(link_source, target_path)
        except OSError as e:
            raise LinkError(output_path, target_path, e) from e

        LOG(f"Linking {link_source} to {target_path}", level=1)
        return target_path
