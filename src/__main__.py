#!/usr/bin/env python3
"""
mdpress - Markdown to PDF/HTML converter

Converts Markdown documents, including LaTeX math and Mermaid diagrams,
into styled PDF or standalone HTML files.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Markdown in, print-ready documents out
    - Safe by default: rendered HTML is always sanitized
    - Per-document options live in YAML front matter next to the text

Key Features:
    - Block ($$...$$) and inline ($...$) math rendered as MathML
    - Mermaid diagrams drawn by the browser before printing
    - Pygments code highlighting with selectable styles
    - GitHub-style tables, strikethrough and task lists

Usage:
    mdpress inputdir/ outputdir/ [--pattern "**/*.md"] [--asHtml]

    Every Markdown file matching the pattern in inputdir/ is converted and
    written to the same relative location in outputdir/ with a .pdf (or
    .html) suffix.

Examples:
    # Convert every Markdown file to PDF
    mdpress docs/ out/

    # Single file, Letter paper, wide margins
    mdpress . out/ --pattern README.md --format Letter --margin "2cm 2.5cm"

    # HTML output with a dark highlight style
    mdpress docs/ site/ --asHtml --highlightStyle monokai -vv
"""

import json
import sys
from pathlib import Path
from argparse import ArgumentParser, ArgumentTypeError, Namespace, ArgumentDefaultsHelpFormatter
from typing import Any, Dict, List

import yaml
from chris_plugin import chris_plugin
from pydantic import ValidationError

from .lib import Converter, BrowserSession, PdfRenderError, ThemeError, __version__, LOG, WARN, state_connectToLogger
from .lib.theme import theme_validate
from .models import ProgramState, pipeline, DocumentConfig


DISPLAY_TITLE = r"""
               _
  _ __ ___  __| |_ __  _ __ ___  ___ ___
 | '_ ` _ \/ _` | '_ \| '__/ _ \/ __/ __|
 | | | | | | (_| | |_) | | |  __/\__ \__ \
 |_| |_| |_|\__,_| .__/|_|  \___||___/___/
                 |_|

  Markdown to PDF/HTML converter
"""


def margin_parse(value: str) -> Dict[str, str]:
    """
    Parse a CSS-style margin shorthand.

    Args:
        value: One to four CSS lengths, e.g. "2cm", "1cm 2cm",
               "1cm 2cm 3cm", "1cm 2cm 1cm 2cm"

    Returns:
        Dict with top/right/bottom/left keys

    Raises:
        ArgumentTypeError: If there are no values or more than four
    """
    parts = value.split()
    if len(parts) == 1:
        top = right = bottom = left = parts[0]
    elif len(parts) == 2:
        top, right = parts
        bottom, left = top, right
    elif len(parts) == 3:
        top, right, bottom = parts
        left = right
    elif len(parts) == 4:
        top, right, bottom, left = parts
    else:
        raise ArgumentTypeError(f"margin needs 1 to 4 values, got {value!r}")
    return {"top": top, "right": right, "bottom": bottom, "left": left}


def json_parse(value: str) -> Dict[str, Any]:
    """argparse type for JSON object options"""
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise ArgumentTypeError(f"invalid JSON: {e}")
    if not isinstance(parsed, dict):
        raise ArgumentTypeError("expected a JSON object")
    return parsed


# Define CLI arguments
parser = ArgumentParser(
    description="mdpress - Markdown to PDF/HTML converter with math and diagrams",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern", default="**/*.md", type=str, help="Glob selecting Markdown files inside inputdir"
)

parser.add_argument(
    "--configFile", default=None, type=str, help="YAML or JSON file with document options"
)

parser.add_argument("--asHtml", action="store_true", help="Write standalone HTML instead of PDF")

parser.add_argument(
    "--highlightStyle", default=None, type=str, help="Pygments style for code blocks (e.g. monokai)"
)

parser.add_argument(
    "--stylesheet",
    action="append",
    default=None,
    type=str,
    help="Extra stylesheet path or URL (can be repeated)",
)

parser.add_argument("--css", default=None, type=str, help="Inline CSS appended to the stylesheets")

parser.add_argument(
    "--script", action="append", default=None, type=str, help="Extra JavaScript file (can be repeated)"
)

parser.add_argument(
    "--format",
    default=None,
    choices=["A4", "Letter", "A3", "A5", "Legal", "Tabloid"],
    help="PDF page format",
)

parser.add_argument("--landscape", action="store_true", help="Landscape page orientation")

parser.add_argument(
    "--margin", default=None, type=str, help='Page margins, e.g. "2cm" or "1cm 2cm" or "1cm 2cm 1cm 2cm"'
)

parser.add_argument("--noBackground", action="store_true", help="Do not print background graphics")

parser.add_argument("--title", default=None, type=str, help="Document title")

parser.add_argument(
    "--pageMediaType", default=None, choices=["screen", "print"], help="CSS media type to emulate"
)

parser.add_argument(
    "--markdownOptions",
    default=None,
    type=str,
    help="Markdown parser options as JSON (html, linkify, typographer, breaks)",
)

parser.add_argument(
    "--launchOptions", default=None, type=str, help="Browser launch options as JSON"
)

parser.add_argument("--encoding", default=None, type=str, help="Encoding of the Markdown files")

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument(
    "-q",
    "--quiet",
    dest="verbosity",
    action="store_const",
    const=0,
    help="Suppress progress output and warnings; errors are still printed",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def configFile_load(path: Path) -> Dict[str, Any]:
    """
    Read document options from a YAML or JSON file.

    Raises:
        ValueError: If the file is not valid YAML/JSON or not a mapping
        OSError: If the file cannot be read
    """
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path} is not valid YAML/JSON: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of options")
    return data


def cliOverrides_build(state: ProgramState) -> Dict[str, Any]:
    """
    Collect the document options given on the command line.

    Only options the user actually passed are included, so they override
    the config file without resetting anything else.

    Raises:
        ArgumentTypeError: If --margin or a JSON option is malformed
    """
    overrides: Dict[str, Any] = {}
    pdf_options: Dict[str, Any] = {}

    if state.asHtml:
        overrides["as_html"] = True
    if state.highlightStyle:
        overrides["highlight_style"] = state.highlightStyle
    if state.stylesheet:
        overrides["stylesheet"] = list(state.stylesheet)
    if state.css:
        overrides["css"] = state.css
    if state.script:
        overrides["script"] = [{"path": p} for p in state.script]
    if state.title:
        overrides["document_title"] = state.title
    if state.pageMediaType:
        overrides["page_media_type"] = state.pageMediaType
    if state.encoding:
        overrides["md_file_encoding"] = state.encoding
    if state.markdownOptions:
        overrides["markdown_options"] = json_parse(state.markdownOptions)
    if state.launchOptions:
        overrides["launch_options"] = json_parse(state.launchOptions)

    if state.format:
        pdf_options["format"] = state.format
    if state.landscape:
        pdf_options["landscape"] = True
    if state.margin:
        pdf_options["margin"] = margin_parse(state.margin)
    if state.noBackground:
        pdf_options["print_background"] = False
    if pdf_options:
        overrides["pdf_options"] = pdf_options

    return overrides


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment, build the document configuration and find inputs.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - documentConfig: Config file options overridden by the CLI
            - fileMap: (input file, output file) pairs
            - envOK: True if environment is valid

    Exits:
        1 if the config file or options are invalid, or no input matches
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    options: Dict[str, Any] = {}
    if state.configFile:
        config_path = Path(state.configFile)
        if not config_path.is_absolute() and not config_path.exists():
            config_path = state.inputdir / config_path
        try:
            options = configFile_load(config_path)
        except (OSError, ValueError) as e:
            print(f"Error: Could not load config file: {e}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        LOG(f"Config file: {config_path}", level=2)

    try:
        state.documentConfig = DocumentConfig().merged(options).merged(cliOverrides_build(state))
    except (ArgumentTypeError, ValidationError) as e:
        print(f"Error: Invalid document options: {e}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.documentConfig.highlight_style:
        valid, message = theme_validate(state.documentConfig.highlight_style)
        if valid:
            LOG(message, level=2)
        else:
            WARN(message)

    suffix = ".html" if state.documentConfig.as_html else ".pdf"
    inputs: List[Path] = sorted(p for p in state.inputdir.glob(state.pattern) if p.is_file())
    if not inputs:
        print(f"Error: No files matching '{state.pattern}' in {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.fileMap = [
        (source, (state.outputdir / source.relative_to(state.inputdir)).with_suffix(suffix))
        for source in inputs
    ]
    LOG(f"Found {len(state.fileMap)} input file(s)", level=2)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def document_convert(converter: Converter, source: Path, target: Path) -> Dict[str, Any]:
    """
    Convert one file and write it next to its mapped output path.

    Front matter may switch a document to HTML, in which case the output
    suffix follows the produced format.

    Returns:
        Result dict with status, input, output and size
    """
    result = converter.file_convert(source)
    if result.filename is None:
        target = target.with_suffix(".html" if result.as_html else ".pdf")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(result.content)
        output = str(target)
    else:
        output = result.filename
    LOG(f"{source.name} -> {output}", level=1)
    return {"status": True, "input": str(source), "output": output, "size": len(result.content)}


def documents_convert(inputstate: ProgramState) -> ProgramState:
    """
    Convert every mapped input file.

    A failing document is reported and skipped; the others still convert.
    A single browser is shared by all PDF conversions.

    Args:
        inputstate: Program state with documentConfig and fileMap

    Returns:
        ProgramState with added field:
            - convertResults: One dict per input file

    Exits:
        1 if the environment check did not pass
    """

    state = inputstate.copy()

    if not state.envOK or state.documentConfig is None:
        print("Error: Environment not checked", file=sys.stderr)
        sys.exit(1)

    LOG(f"Converting {len(state.fileMap)} document(s)...", level=1)

    results: List[Dict[str, Any]] = []
    browser = BrowserSession(state.documentConfig.launch_options)
    converter = Converter(state.documentConfig, browser=browser)
    try:
        for source, target in state.fileMap:
            try:
                results.append(document_convert(converter, source, target))
            except (OSError, LookupError, ValueError, PdfRenderError, ThemeError) as e:
                print(f"Error converting {source}: {e}", file=sys.stderr)
                if state.verbosity >= 3:
                    import traceback

                    traceback.print_exc()
                results.append({"status": False, "input": str(source), "error": str(e)})
    finally:
        browser.close()

    state.convertResults = results
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display conversion results to user.

    Args:
        inputstate: Program state with convertResults populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if no results exist or any document failed
    """
    state: ProgramState = inputstate.copy()
    if not state.convertResults:
        print("Error: Conversion failed", file=sys.stderr)
        sys.exit(1)

    converted = [r for r in state.convertResults if r["status"]]
    failed = [r for r in state.convertResults if not r["status"]]

    if state.verbosity >= 1:
        LOG(f"\n✓ Converted {len(converted)} of {len(state.convertResults)} document(s)", level=1)
        for r in converted:
            LOG(f"  {r['output']} ({r['size']} bytes)", level=2)
        for r in failed:
            LOG(f"  ✗ {r['input']}: {r['error']}", level=1)

    if failed:
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="mdpress - Markdown to PDF/HTML converter",
    category="Utility",
    min_memory_limit="500Mi",
    min_cpu_limit="1000m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert Markdown documents to PDF or HTML.

    Orchestrates the full conversion pipeline:
        1. env_check: Build configuration, find input files
        2. documents_convert: Render and print each document
        3. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing Markdown source files
        outputdir: Directory where converted documents will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    # Execute conversion pipeline
    pipeline(state, env_check, documents_convert, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
