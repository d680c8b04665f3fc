from typing import Optional, Union

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput

from .exceptions import ParseError
from .models import Argument, Assignment, Exit, Load, MethodCall, Out, Save, Show
from .schema import KIND_NAMES

Statement = Union[Assignment, MethodCall, Out, Save, Load, Show, Exit]

# Longest names first so the alternation never stops on a shorter prefix.
_KIND_PATTERN = "|".join(sorted(KIND_NAMES, key=len, reverse=True))

NOISE_GRAMMAR = (
    r"""
    start: statement

    // --- STATEMENTS (one per line) ---
    // Blanks are only allowed where noted; keywords can still name modules.
    statement: name _EQ KIND "(" ")"                 -> assignment
             | name _EQ KIND "(" names _NAMES_END    -> assignment
             | name "->" METHOD "(" [args] ")"       -> method_call
             | OUT _WS NAME                          -> out
             | SAVE _WS FILENAME                     -> save
             | LOAD _WS FILENAME                     -> load
             | SHOW _WS SIZE                         -> show
             | EXIT _WS?                             -> exit

    name: NAME | OUT | SAVE | LOAD | SHOW | EXIT
    names: NAME (_COMMA NAME)*
    args: arg (_COMMA arg)*
    arg: NUMBER | NAME

    OUT: "out"
    SAVE: "save"
    LOAD: "load"
    SHOW: "show"
    EXIT: "exit"

    KIND: /(?:"""
    + _KIND_PATTERN
    + r""")(?![a-zA-Z0-9])/
    METHOD: /[A-Z][a-zA-Z]*/
    NAME: /[a-zA-Z][a-zA-Z0-9]*/
    NUMBER: /-?\d*\.?\d+/
    FILENAME: /[a-zA-Z0-9_]*\.?[a-zA-Z0-9_]+/
    SIZE: /\d{1,4}x\d{1,4}/

    _WS: /[ \t]+/
    _EQ: /[ \t]*=[ \t]*/
    _COMMA: /[ \t]*,[ \t]*/
    _NAMES_END: /[ \t]*\)/
"""
)


class StatementBuilder(Transformer):
    """Turns a parse tree into one of the typed statement records."""

    def start(self, children):
        return children[0]

    def assignment(self, children):
        identifier, kind = children[:2]
        names = children[2] if len(children) > 2 else None
        return Assignment(str(identifier), str(kind), tuple(names or ()))

    def name(self, children):
        return str(children[0])

    def method_call(self, children):
        identifier, method, args = children
        return MethodCall(str(identifier), str(method), tuple(args or ()))

    def names(self, children):
        return [str(tok) for tok in children]

    def args(self, children):
        return list(children)

    def arg(self, children):
        return Argument.classify(str(children[0]))

    def out(self, children):
        return Out(str(children[-1]))

    def save(self, children):
        return Save(str(children[-1]))

    def load(self, children):
        return Load(str(children[-1]))

    def show(self, children):
        width, height = str(children[-1]).split("x")
        return Show(int(width), int(height))

    def exit(self, children):
        return Exit()


_PARSER = None


def get_parser() -> Lark:
    """Lazily construct and cache the statement parser."""
    global _PARSER
    if _PARSER is None:
        _PARSER = Lark(
            NOISE_GRAMMAR,
            parser="lalr",
            transformer=StatementBuilder(),
        )
    return _PARSER


def parse_statement(line: str) -> Optional[Statement]:
    """Parse one line. Blank lines yield None.

    Only the line terminator is dropped; other blanks must sit where the
    grammar allows them.
    """
    text = line.rstrip("\r\n")
    if not text.strip():
        return None
    try:
        return get_parser().parse(text)
    except UnexpectedInput as e:
        raise ParseError(f"Line does not match any patterns: {text!r}") from e
