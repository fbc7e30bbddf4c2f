#!/usr/bin/env python3
"""
dotprep - Line-oriented dotfile preprocessor

Preprocesses configuration files ("dotfiles") listed in a TOML configuration
and links their targets to the preprocessed results.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - One source file, many machines: the differences live in directive lines
    - Directive lines hide behind a prefix the file format treats as a comment
    - Questions are asked once per file run, never stored

Key Features:
    - IFDEF/IFNDEF/IF conditionals on environment variables and commands
    - ASK yes/no and multiple-choice (OPTION) blocks
    - {{{KEY}}} substitutions from the configuration or the environment
    - Target links to the preprocessed files

Usage:
    dotprep inputdir/ outputdir/ --configFile preprocessor.toml

    inputdir holds the configuration file and is the root for relative
    source and target paths. Preprocessed files are written to outputdir.

Examples:
    # Preprocess and link
    dotprep ~/dotfiles ~/.cache/dotprep

    # Preprocess only, verbose
    dotprep ~/dotfiles ~/.cache/dotprep --noLink -vv

    # Show the directive keywords
    dotprep ~/dotfiles ~/.cache/dotprep --listDirectives
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import DirectiveRegistry, Preprocessor, config_load, __version__, LOG, state_connectToLogger
from .lib.errors import PreprocessorError
from .models import DirectiveCategory, ProgramState, pipeline


DISPLAY_TITLE = r"""
      _       _
   __| | ___ | |_ _ __  _ __ ___ _ __
  / _` |/ _ \| __| '_ \| '__/ _ \ '_ \
 | (_| | (_) | |_| |_) | | |  __/ |_) |
  \__,_|\___/ \__| .__/|_|  \___| .__/
                 |_|            |_|
  Line-oriented dotfile preprocessor
"""

# Define CLI arguments
parser = ArgumentParser(
    description="dotprep - Line-oriented dotfile preprocessor with conditional and interactive directives",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--configFile",
    default=None,
    type=str,
    help=f"Configuration file (relative to inputdir). Defaults to {appsettings.default_config_file}",
)

parser.add_argument(
    "--noLink",
    action="store_true",
    default=False,
    help="Only write the preprocessed files, do not link the targets",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Abort on the first file that fails to preprocess",
)

parser.add_argument(
    "--listDirectives",
    action="store_true",
    default=False,
    help="List the directive keywords and exit",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def directives_list() -> None:
    """Print the directive keywords grouped by category, with examples"""
    registry = DirectiveRegistry()
    for category in DirectiveCategory:
        print(f"{category.value.upper()}:")
        for spec in registry.directives_listByCategory(category):
            print(f"  {spec.name:<8} {spec.description}")
            for example in spec.examples:
                print(f"  {'':<8}   {example}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the configuration file path.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - configPath: Resolved path to the configuration file
            - envOK: True if environment is valid

    Exits:
        1 if the configuration file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    config_path = state.inputdir / (state.configFile or appsettings.default_config_file)

    if not config_path.is_file():
        print(f"Error: Configuration file not found: {config_path}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.configPath = config_path
    LOG(f"Configuration file: {config_path}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def config_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read and normalize the configuration file.

    Args:
        inputstate: Program state with configPath set

    Returns:
        ProgramState with added field:
            - config: Normalized Config

    Exits:
        1 if the configuration cannot be read or is invalid
    """

    state = inputstate.copy()

    LOG("Loading configuration...", level=1)
    try:
        state.config = config_load(state.configPath)
    except PreprocessorError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Loaded {len(state.config.file_configurations)} file configurations", level=2)
    return state


def files_preprocess(inputstate: ProgramState) -> ProgramState:
    """
    Preprocess every configured file and link the targets.

    Args:
        inputstate: Program state with config

    Returns:
        ProgramState with added field:
            - preprocessResult: Dict containing:
                - status: bool (no file failed)
                - processed: list of written preprocessed files
                - linked: list of created target links
                - failed: list of sources that failed

    Exits:
        1 if config is None, or on the first failure in strict mode
    """

    state = inputstate.copy()

    if state.config is None:
        print("Error: No configuration available", file=sys.stderr)
        sys.exit(1)

    preprocessor = Preprocessor(
        config=state.config,
        root=str(state.configPath.parent),
        output_dir=str(state.outputdir),
        link=not state.noLink,
        strict=state.strict,
    )
    try:
        state.preprocessResult = preprocessor.run()
    except PreprocessorError as e:
        print(f"Preprocessing aborted: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the run results.

    Args:
        inputstate: Program state with preprocessResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if preprocessResult is None or any file failed
    """
    state: ProgramState = inputstate.copy()
    if not state.preprocessResult:
        print("Error: Preprocessing failed", file=sys.stderr)
        sys.exit(1)

    result = state.preprocessResult
    LOG(f"Preprocessed: {len(result['processed'])} files", level=1)
    LOG(f"Linked:       {len(result['linked'])} targets", level=1)
    for target in result['linked']:
        LOG(f"  {target}", level=2)

    if not result['status']:
        print(f"Error: {len(result['failed'])} file(s) failed:", file=sys.stderr)
        for source in result['failed']:
            print(f"  {source}", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="dotprep - Line-oriented dotfile preprocessor",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - preprocess the files listed in the configuration.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. config_parse: Read and normalize the TOML configuration
        3. files_preprocess: Evaluate directives, substitute, write, link
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - configFile: Optional[str] - Configuration filename
            - noLink: bool - Skip target links
            - strict: Optional[bool] - Abort on first failing file
            - listDirectives: bool - List directives and exit
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing the configuration file
        outputdir: Directory where preprocessed files will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    if options.listDirectives:
        directives_list()
        return

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, config_parse, files_preprocess, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
