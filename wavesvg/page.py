"""Page assembler: wrap rendered waves into a self-contained HTML document.

The page has two parts substituted into the packaged wrapper.html template:
the controls (a collapsible scope tree with one checkbox per scope and per
variable) and the display (a name column and a wave column with one row per
drawable, decomposed bus bits included).
"""

from html import escape
from importlib import resources
from typing import Callable, List, Optional, TypeVar

from .bus_decomposer import bit_number
from .config import PAGE, PageConfig
from .data_model import Header, Scope, Signal
from .pipeline import RenderResult

State = TypeVar('State')


def walk_dfs(
    header: Header,
    open_: Callable[[], State],
    open_scope: Callable[[State, Scope], None],
    do_var: Callable[[State, Signal], None],
    close_scope: Callable[[State, Scope], None],
    close: Callable[[State], None],
) -> State:
    """Depth-first walk of the declaration tree with enter/leave hooks."""
    def walk_scope(state: State, scope: Scope) -> None:
        open_scope(state, scope)
        for child in scope.children:
            if isinstance(child, Signal):
                do_var(state, child)
            else:
                walk_scope(state, child)
        close_scope(state, scope)

    state = open_()
    for item in header.items:
        if isinstance(item, Signal):
            do_var(state, item)
        else:
            walk_scope(state, item)
    close(state)
    return state


def _nothing(*_args) -> None:
    return None


def format_vars(header: Header) -> List[str]:
    """Scope tree controls."""
    def open_scope(parts: List[str], scope: Scope) -> None:
        name = escape(scope.name)
        parts.append(
            f'<li class="scope closed">\n'
            f'<div class="arrow"></div><label><input class="scope-checkbox" type="checkbox" '
            f'data-name="{name}" checked/>{name}</label>\n<ul>'
        )

    def do_var(parts: List[str], signal: Signal) -> None:
        parts.append(
            f'<li class="var">\n<label><input type="checkbox" data-id="{escape(signal.identifier)}" '
            f'checked/>{escape(signal.display_name)}</label></li>'
        )

    return walk_dfs(
        header,
        lambda: ["<ul>"],
        open_scope,
        do_var,
        lambda parts, _: parts.append("</ul>\n</li>"),
        lambda parts: parts.append("</ul>"),
    )


def format_names(header: Header, result: RenderResult) -> List[str]:
    """Name column: one row per drawable, aligned with format_waves."""
    def do_var(parts: List[str], signal: Signal) -> None:
        rendered = result.rendered(signal.identifier)
        if rendered is None:
            return
        identifier = escape(signal.identifier)
        parts.append(f'<li data-id="{identifier}">{escape(signal.display_name)}</li>')
        for index in range(len(rendered.bits)):
            parts.append(
                f'<li class="bit" data-id="{identifier}" data-bit="{index}">'
                f'{escape(signal.name)}[{bit_number(signal.width, index)}]</li>'
            )

    return walk_dfs(
        header,
        lambda: ['<div id="labels"><ul>'],
        _nothing,
        do_var,
        _nothing,
        lambda parts: parts.append("</ul></div>"),
    )


def count_rows(header: Header, result: RenderResult) -> int:
    rows = 0
    for signal in header.iter_signals():
        rendered = result.rendered(signal.identifier)
        if rendered is not None:
            rows += 1 + len(rendered.bits)
    return rows


def format_waves(header: Header, result: RenderResult, config: PageConfig = PAGE) -> List[str]:
    """Wave column; signals that never changed get no row."""
    height = count_rows(header, result) * config.ROW_HEIGHT_PX + config.HEIGHT_PADDING_PX

    def do_var(parts: List[str], signal: Signal) -> None:
        rendered = result.rendered(signal.identifier)
        if rendered is None:
            return
        identifier = escape(signal.identifier)
        parts.append(f'<li data-id="{identifier}">{rendered.wave}</li>')
        for index, bit in enumerate(rendered.bits):
            parts.append(f'<li class="bit" data-id="{identifier}" data-bit="{index}">{bit}</li>')

    return walk_dfs(
        header,
        lambda: [f'<div id="waves" style="height: {height}px;"><ul>'],
        _nothing,
        do_var,
        _nothing,
        lambda parts: parts.append("</ul></div>"),
    )


def load_template(config: PageConfig = PAGE) -> str:
    return resources.files("wavesvg").joinpath(config.TEMPLATE_NAME).read_text(encoding="utf-8")


def build_page(result: RenderResult, template: Optional[str] = None, config: PageConfig = PAGE) -> str:
    """Assemble the complete HTML document of a run."""
    header = result.header
    if template is None:
        template = load_template(config)
    controls = "".join(format_vars(header))
    display = "".join(format_names(header, result)) + "".join(format_waves(header, result, config))
    return (
        template
        .replace(config.TITLE_PLACEHOLDER, escape(config.TITLE), 1)
        .replace(config.DISPLAY_PLACEHOLDER, display, 1)
        .replace(config.CONTROLS_PLACEHOLDER, controls, 1)
    )
