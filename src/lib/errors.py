"""
Exceptions raised by dotprep

Every error is terminal for the file being processed: either a complete
skip set is produced or none is. The caller decides whether to skip the
file or abort the run.
"""

from pathlib import Path
from typing import Any


class PreprocessorError(Exception):
    """Base class of all dotprep errors"""
    pass


class UnrecognizedDirectiveError(PreprocessorError):
    """A line starts with the prefix but matches no directive grammar"""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Unrecognized preprocessor instruction: {text!r}")


class StrayDirectiveError(PreprocessorError):
    """ELSE, ENDIF, OPTION or ENDASK without a matching open block at its level"""

    def __init__(self, line: int, directive: str) -> None:
        self.line = line
        self.directive = directive
        super().__init__(f"Stray instruction {directive!r} found at line {line + 1}")


class MissingClosingDirectiveError(PreprocessorError):
    """A block opener reaches the end of the file without its closer"""

    def __init__(self, line: int, directive: str) -> None:
        self.line = line
        self.directive = directive
        super().__init__(f"Missing closing instruction for {directive!r} opened at line {line + 1}")


class UserInputError(PreprocessorError):
    """The answer to an interactive question could not be read"""
    pass


class ConfigError(PreprocessorError):
    """The configuration file could not be loaded or is invalid"""
    pass


class SourceReadError(PreprocessorError):
    """A source file could not be read"""

    def __init__(self, path: Path, cause: Any) -> None:
        self.path = path
        super().__init__(f"Failed to read source file {str(path)!r}: {cause}")


class OutputWriteError(PreprocessorError):
    """A preprocessed file could not be written"""

    def __init__(self, path: Path, cause: Any) -> None:
        self.path = path
        super().__init__(f"Failed to write preprocessed file {str(path)!r}: {cause}")


class TargetExistsError(PreprocessorError):
    """The link target exists and is not a symbolic link"""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Target {str(path)!r} already exists and is not a link")


class LinkError(PreprocessorError):
    """The target link could not be created"""

    def __init__(self, source: Path, target: Path, cause: Any) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Failed to create link {str(target)!r}, pointing to {str(source)!r}: {cause}")
