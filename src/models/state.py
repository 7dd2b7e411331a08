"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable, Tuple, TYPE_CHECKING
from dataclasses import dataclass, field

# Forward reference for type hint - avoid circular import
if TYPE_CHECKING:
    from .document import DocumentConfig


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the conversion progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity and the CLI options
        - env_check: documentConfig, fileMap, envOK
        - documents_convert: convertResults
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the Markdown sources
        outputdir: Base output directory for converted files
        verbosity: Logging verbosity level (0 quiet, 1-3 increasingly chatty)
        pattern: Glob selecting input files inside inputdir
        configFile: Optional YAML/JSON file with document options
        asHtml: Produce HTML instead of PDF
        highlightStyle: Pygments style for code blocks
        stylesheet: Extra stylesheets
        css: Inline CSS
        script: Extra script files
        format: PDF page format
        landscape: Landscape orientation
        margin: Margin shorthand ("1cm", "1cm 2cm", "1cm 2cm 1cm 2cm")
        noBackground: Do not print background graphics
        title: Document title
        pageMediaType: CSS media type to emulate ("screen" or "print")
        markdownOptions: Markdown parser toggles as a JSON string
        launchOptions: Browser launch options as a JSON string
        encoding: Encoding of the Markdown input files
        envOK: Environment validation passed
        documentConfig: Merged document options (config file + CLI)
        fileMap: (input, output) path pairs to convert
        convertResults: One result dict per converted file
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: str = field(default="**/*.md")
    configFile: Optional[str] = field(default=None)
    asHtml: bool = field(default=False)
    highlightStyle: Optional[str] = field(default=None)
    stylesheet: Optional[List[str]] = field(default=None)
    css: Optional[str] = field(default=None)
    script: Optional[List[str]] = field(default=None)
    format: Optional[str] = field(default=None)
    landscape: bool = field(default=False)
    margin: Optional[str] = field(default=None)
    noBackground: bool = field(default=False)
    title: Optional[str] = field(default=None)
    pageMediaType: Optional[str] = field(default=None)
    markdownOptions: Optional[str] = field(default=None)
    launchOptions: Optional[str] = field(default=None)
    encoding: Optional[str] = field(default=None)

    # Pipeline state
    envOK: bool = field(default=False)
    documentConfig: Optional["DocumentConfig"] = field(default=None)
    fileMap: List[Tuple[Path, Path]] = field(default_factory=list)
    convertResults: Optional[List[Dict[str, Any]]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the conversion pipeline.

        Args:
            options: Parsed CLI arguments (pattern, asHtml, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for conversion output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        # Get the dictionary of all attributes from the Namespace
        options_dict = vars(options)

        # Get the set of valid field names for ProgramState
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Filter options_dict to only include fields that exist in ProgramState
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        # Merge the filtered CLI options with the explicitly defined arguments.
        # This will override any defaults set in the dataclass.
        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        # Instantiate the dataclass by unpacking the merged dictionary.
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            documents_convert,
            results_report
        )

    This is equivalent to:
        results_report(documents_convert(env_check(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
