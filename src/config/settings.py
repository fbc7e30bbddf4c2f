"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOTPREP_ prefix (e.g., DOTPREP_STRICT_MODE=true).

Settings can also be loaded from a .env file in the working directory.
These are settings of the tool itself; the list of files to preprocess lives
in the TOML configuration file (see models/config.py).
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOTPREP_ prefix.

    Examples:
        DOTPREP_PREPROCESSED_SUFFIX=.compiled
        DOTPREP_STRICT_MODE=true
        DOTPREP_SHELL=bash
    """

    model_config = SettingsConfigDict(
        env_prefix="DOTPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Output configuration
    preprocessed_suffix: str = Field(
        default=".preprocessed",
        description="Suffix appended to the name of every preprocessed file",
    )

    default_config_file: str = Field(
        default="preprocessor.toml",
        description="Configuration file name looked up in inputdir when --configFile is not given",
    )

    # Expansion configuration
    shell: str = Field(
        default="sh",
        description="Shell used to run $(command) substitutions",
    )

    shell_flag: str = Field(
        default="-c",
        description="Flag passing the command string to the shell",
    )

    # Processing configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: abort the whole run on the first failing file",
    )

    def preprocessedPath_make(self, outputdir: Path, relative: Path) -> Path:
        """
        Build the path of a preprocessed file inside the output directory.

        Args:
            outputdir: Directory receiving preprocessed files
            relative: Source path relative to the configuration root

        Returns:
            Output path with the preprocessed suffix appended

        Example:
            >>> settings = AppSettings()
            >>> settings.preprocessedPath_make(Path("out"), Path("vim/vimrc"))
            PosixPath('out/vim/vimrc.preprocessed')
        """
        return outputdir / relative.parent / f"{relative.name}{self.preprocessed_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
