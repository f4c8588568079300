"""Colors, styles and the shared stderr console."""

from __future__ import annotations

from pygments.token import (
    Comment,
    Error,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
    Token,
)
from rich.console import Console
from rich.style import Style
from rich.syntax import SyntaxTheme
from rich.theme import Theme


class MonokaiProTheme(SyntaxTheme):
    """Rich syntax-highlighting theme that matches Monokai Pro, tuned for one-line shell commands."""

    _RED = "#ff6188"
    _GREEN = "#a9dc76"
    _YELLOW = "#ffd866"
    _ORANGE = "#fc9867"
    _PURPLE = "#ab9df2"
    _CYAN = "#78dce8"
    _COMMENT_GRAY = "#727072"

    # No foreground or background of its own: blends with the terminal and
    # with the reversed selection highlight.
    default_style = Style()

    styles = {
        Keyword: Style(color=_RED, bold=True),  # if, for, do
        Name.Builtin: Style(color=_CYAN, italic=True),  # cd, echo, export
        Name.Variable: Style(color=_PURPLE),  # $HOME, ${PATH}
        Name.Attribute: Style(color=_ORANGE),
        Number: Style(color=_CYAN),
        Operator: Style(color=_RED),  # | && > <
        Punctuation: Style(),
        String: Style(color=_YELLOW),
        String.Escape: Style(color=_PURPLE),
        String.Interpol: Style(color=_PURPLE, bold=True),  # $( ... ) and `...`
        String.Backtick: Style(color=_PURPLE, bold=True),
        Comment: Style(color=_COMMENT_GRAY, italic=True),
        Error: Style(color=_RED, bold=True),
        Text: Style(),
        Token: Style(),
    }

    def get_style_for_token(self, token_type) -> Style:
        # Walk up the token hierarchy: String.Double falls back to String
        while token_type not in self.styles:
            token_type = token_type.parent
            if token_type is None:
                return self.default_style
        return self.styles[token_type]

    def get_background_style(self) -> Style:
        return Style()


# Concrete styles, not theme names: textual renders with its own console,
# which does not know about CUSTOM_THEME.
TIMESTAMP_STYLE = Style(color="#5C6370")
INDEX_STYLE = Style(color="#61AFEF")
SELECTED_STYLE = Style(reverse=True, bold=True)
MARKER_STYLE = Style(color="#FF4500", bold=True)

CUSTOM_THEME = Theme({
    "error": "#E06C75",
})

SYNTAX_THEME = MonokaiProTheme()

# stdout belongs to the selected command; everything else goes to stderr
console = Console(stderr=True, theme=CUSTOM_THEME)
