"""
The LBASIC line grammar and its LL(1) analysis.

The grammar is kept as data so that the FIRST/FOLLOW/PREDICT sets the
validator dispatches on are computed rather than written out by hand. Terminals
are canonical token types from `lbasic_constants.token_hashmap` plus `IDENT`,
`NUMBER` and the end-of-line marker `EOL`. Nonterminals are lowercase. An empty
right-hand side is the epsilon production.

The program level (`program -> linelist $$`, `linelist -> line linelist | ε`)
is line-oriented and is walked by the program validator, so only the grammar of
a single line lives here.

Functions:
    first_sets(grammar) -> dict[str, frozenset[str]]
    follow_sets(grammar, start) -> dict[str, frozenset[str]]
    predict_sets(grammar, start) -> dict[str, list[tuple[Production, frozenset[str]]]]
    first_of_sequence(symbols, first) -> frozenset[str]
    is_ll1(grammar, start) -> bool
    conflicts(grammar, start) -> list[tuple[str, Production, Production, frozenset[str]]]
    format_sets(grammar, start) -> str
"""

from __future__ import annotations

EPSILON = "ε"
END_OF_LINE = "EOL"

Production = tuple[str, ...]
Grammar = dict[str, list[Production]]

LINE_GRAMMAR: Grammar = {
    "line": [("IDENT", "after_ident"), ("keyword_stmt", "linetail")],
    "after_ident": [
        ("COLON", "stmt", "linetail"),
        ("EQUALS", "expr", "linetail"),
    ],
    "stmt": [("IDENT", "EQUALS", "expr"), ("keyword_stmt",)],
    "keyword_stmt": [
        ("IF", "boolean"),
        ("WHILE", "boolean"),
        ("ENDWHILE",),
        ("READ", "IDENT"),
        ("WRITE", "expr"),
        ("GOTO", "IDENT"),
        ("GOSUB", "IDENT"),
        ("RETURN",),
        ("BREAK",),
        ("END",),
    ],
    "linetail": [("SEMI", "stmt", "linetail"), ()],
    "expr": [("operand", "etail")],
    "operand": [
        ("IDENT",),
        ("NUMBER",),
        ("sign", "NUMBER"),  # no whitespace between sign and digits
        ("LPAREN", "expr", "RPAREN"),
    ],
    "sign": [("PLUS",), ("SUB",)],
    "etail": [("arith", "expr"), ()],
    "arith": [("PLUS",), ("SUB",), ("MULT",), ("DIV",)],
    "boolean": [
        ("LITERAL",),
        ("IDENT", "etail", "relop", "expr"),
        ("NUMBER", "etail", "relop", "expr"),
        ("sign", "NUMBER", "etail", "relop", "expr"),
        ("LPAREN", "pbool"),
    ],
    "pbool": [("expr", "pbtail")],
    "pbtail": [
        ("relop", "expr", "RPAREN"),
        ("RPAREN", "etail", "relop", "expr"),
    ],
    "relop": [("LT",), ("GT",), ("LE",), ("GE",), ("NE",), ("EQUALS",)],
}

START_SYMBOL = "line"


def first_of_sequence(
    symbols: Production, first: dict[str, frozenset[str]]
) -> frozenset[str]:
    """FIRST of a sequence of grammar symbols; contains EPSILON if all are nullable."""
    result: set[str] = set()
    for symbol in symbols:
        symbol_first = first.get(symbol, frozenset({symbol}))
        result |= symbol_first - {EPSILON}
        if EPSILON not in symbol_first:
            return frozenset(result)
    result.add(EPSILON)
    return frozenset(result)


def first_sets(grammar: Grammar) -> dict[str, frozenset[str]]:
    """Compute FIRST for every nonterminal by fixed-point iteration."""
    first: dict[str, set[str]] = {nt: set() for nt in grammar}
    changed = True
    while changed:
        changed = False
        frozen = {nt: frozenset(s) for nt, s in first.items()}
        for nt, productions in grammar.items():
            for production in productions:
                before = len(first[nt])
                first[nt] |= first_of_sequence(production, frozen)
                if len(first[nt]) != before:
                    changed = True
                    frozen[nt] = frozenset(first[nt])
    return {nt: frozenset(s) for nt, s in first.items()}


def follow_sets(grammar: Grammar, start: str = START_SYMBOL) -> dict[str, frozenset[str]]:
    """Compute FOLLOW for every nonterminal; `start` is followed by EOL."""
    first = first_sets(grammar)
    follow: dict[str, set[str]] = {nt: set() for nt in grammar}
    follow[start].add(END_OF_LINE)
    changed = True
    while changed:
        changed = False
        for nt, productions in grammar.items():
            for production in productions:
                for i, symbol in enumerate(production):
                    if symbol not in grammar:
                        continue
                    trailer = first_of_sequence(production[i + 1 :], first)
                    before = len(follow[symbol])
                    follow[symbol] |= trailer - {EPSILON}
                    if EPSILON in trailer:
                        follow[symbol] |= follow[nt]
                    if len(follow[symbol]) != before:
                        changed = True
    return {nt: frozenset(s) for nt, s in follow.items()}


def predict_sets(
    grammar: Grammar, start: str = START_SYMBOL
) -> dict[str, list[tuple[Production, frozenset[str]]]]:
    """PREDICT(A -> α) = FIRST(α) - {ε}, plus FOLLOW(A) when α is nullable."""
    first = first_sets(grammar)
    follow = follow_sets(grammar, start)
    predict: dict[str, list[tuple[Production, frozenset[str]]]] = {}
    for nt, productions in grammar.items():
        rows = []
        for production in productions:
            alpha = first_of_sequence(production, first)
            tokens = set(alpha - {EPSILON})
            if EPSILON in alpha:
                tokens |= follow[nt]
            rows.append((production, frozenset(tokens)))
        predict[nt] = rows
    return predict


def conflicts(
    grammar: Grammar, start: str = START_SYMBOL
) -> list[tuple[str, Production, Production, frozenset[str]]]:
    """Pairs of productions of one nonterminal whose PREDICT sets overlap."""
    found = []
    for nt, rows in predict_sets(grammar, start).items():
        for i, (left, left_set) in enumerate(rows):
            for right, right_set in rows[i + 1 :]:
                overlap = left_set & right_set
                if overlap:
                    found.append((nt, left, right, overlap))
    return found


def is_ll1(grammar: Grammar, start: str = START_SYMBOL) -> bool:
    return not conflicts(grammar, start)


def _show(symbols: frozenset[str]) -> str:
    return "{" + ", ".join(sorted(symbols)) + "}"


def format_sets(grammar: Grammar = LINE_GRAMMAR, start: str = START_SYMBOL) -> str:
    """Render FIRST, FOLLOW and PREDICT sets as a plain-text report."""
    first = first_sets(grammar)
    follow = follow_sets(grammar, start)
    predict = predict_sets(grammar, start)
    width = max(len(nt) for nt in grammar)

    out = ["FIRST"]
    out += [f"  {nt:<{width}}  {_show(first[nt])}" for nt in grammar]
    out.append("FOLLOW")
    out += [f"  {nt:<{width}}  {_show(follow[nt])}" for nt in grammar]
    out.append("PREDICT")
    for nt, rows in predict.items():
        for production, tokens in rows:
            rhs = " ".join(production) or EPSILON
            out.append(f"  {nt} -> {rhs}  {_show(tokens)}")
    out.append(f"LL(1): {'yes' if is_ll1(grammar, start) else 'no'}")
    return "\n".join(out)


# Token sets the validator dispatches on
FIRST = first_sets(LINE_GRAMMAR)
FOLLOW = follow_sets(LINE_GRAMMAR)

EXPR_START = FIRST["expr"]
ARITH_OPS = FIRST["arith"]
RELATIONAL_OPS = FIRST["relop"]
