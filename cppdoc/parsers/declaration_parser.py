"""
Declaration scanner for preprocessed C++.

This is not a C++ grammar. It splits the token stream into statements and
brace blocks and recognises the declarations an API reference needs:
namespaces, classes with their base lists, functions, variables, enums,
typedefs and alias declarations, together with the doc comment in front of
them. Function bodies and initializers are skipped unread.

Preprocessor line markers ('# 12 "file.h"') give each declaration its real
location; only declarations located in the file being parsed are recorded,
so headers pulled in by #include do not end up in every translation unit.
"""

import os
import re
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

from .base_parser import BaseParser
from .symbol_table import SymbolTable, split_qualified
from .symbols import (
    BaseSymbol, ClassSymbol, EnumSymbol, FunctionSymbol, NamespaceSymbol,
    SymbolKind, TypedefSymbol, VariableSymbol
)
from .. import logger
from ..errors import ParseError

TOKEN_RE = re.compile(r'''
    (?P<marker>^[ \t]*\#[^\n]*)
  | (?P<newline>\n)
  | (?P<space>[ \t\r\f\v]+)
  | (?P<doc>///(?![/<])[^\n]*|//!(?!<)[^\n]*|/\*\*(?![/*<]).*?\*/|/\*!(?!<).*?\*/)
  | (?P<comment>//[^\n]*|/\*.*?\*/)
  | (?P<string>(?:u8|[LuU])?"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*')
  | (?P<word>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<number>\.?[0-9](?:[eEpP][+-]|[0-9A-Za-z_.'])*)
  | (?P<punct>::|->|\.\.\.|.)
''', re.VERBOSE | re.DOTALL | re.MULTILINE)

LINE_MARKER_RE = re.compile(r'^\s*#\s*(?:line\s+)?(\d+)(?:\s+"((?:\\.|[^"\\])*)")?')

CLASS_KEYS = ('class', 'struct', 'union')
ACCESS_SPECIFIERS = ('public', 'protected', 'private')
DECL_SPECIFIERS = ('static', 'inline', 'virtual', 'explicit', 'constexpr', 'consteval',
                   'extern', 'friend', 'mutable', 'thread_local', 'register')
TRAILING_QUALIFIERS = ('const', 'volatile', 'noexcept', 'override', 'final')
IGNORED_STATEMENTS = ('friend', 'static_assert', 'namespace', 'asm', '__asm__')
NOISE_WITH_ARGS = ('__attribute__', '__declspec', 'alignas', '__asm__')
NOISE_WORDS = ('__extension__', '__inline', '__inline__', '__restrict', '__restrict__')
BUILTIN_TYPE_WORDS = ('const', 'volatile', 'int', 'char', 'long', 'short', 'unsigned', 'signed',
                      'double', 'float', 'bool')


class Token:
    def __init__(self, kind: str, text: str, file: str, line: int):
        self.kind = kind
        self.text = text
        self.file = file
        self.line = line

    def __repr__(self) -> str:
        return f"Token({self.kind}: {self.text!r} @{self.line})"


class Scope:
    def __init__(self, kind: str, qualified_name: str, access: str = '',
                 close_with_semicolon: bool = False, declared_type: str = ''):
        self.kind = kind
        self.qualified_name = qualified_name
        self.access = access
        self.close_with_semicolon = close_with_semicolon
        self.declared_type = declared_type

    @property
    def is_class(self) -> bool:
        return self.kind == 'class'


def join_tokens(tokens: List[Token]) -> str:
    """Render tokens back to normalized source text ('const std::string &')."""
    out = []
    prev = None
    for tok in tokens:
        text = tok.text
        if prev is not None:
            if prev in ('::', '<', '(', '[', '~') or text in ('::', '<', '>', ',', ')', ']', '(', '['):
                out.append('')
            elif text in ('*', '&'):
                out.append('' if prev in ('*', '&') else ' ')
            else:
                out.append(' ')
        out.append(text)
        prev = text
    return ''.join(out)


def clean_doc_comment(text: str) -> str:
    if text.startswith('/*'):
        text = text[3:-2]
        lines = [re.sub(r'^\s*\*?\s?', '', line) for line in text.splitlines()]
    else:
        lines = [text[3:]]
        if lines[0].startswith(' '):
            lines[0] = lines[0][1:]
    return '\n'.join(lines).strip()


def _split_top_level(tokens: List[Token], separator: str = ',', angles: bool = True) -> List[List[Token]]:
    """Split at separators outside (), [], {} and, when angles is set, <>."""
    openers = ('(', '[', '{', '<') if angles else ('(', '[', '{')
    closers = (')', ']', '}', '>') if angles else (')', ']', '}')
    parts = [[]]
    depth = 0
    for tok in tokens:
        if tok.text in openers:
            depth += 1
        elif tok.text in closers and depth > 0:
            depth -= 1
        elif tok.text == separator and depth == 0:
            parts.append([])
            continue
        parts[-1].append(tok)
    return [p for p in parts if p]


def _find_closing(tokens: List[Token], start: int, open_text: str, close_text: str) -> int:
    depth = 0
    for i in range(start, len(tokens)):
        if tokens[i].text == open_text:
            depth += 1
        elif tokens[i].text == close_text:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _find_template_close(tokens: List[Token], start: int) -> int:
    """tokens[start] is '<'; a '>' inside parentheses does not close the header."""
    depth = 0
    parens = 0
    for i in range(start, len(tokens)):
        text = tokens[i].text
        if text in ('(', '['):
            parens += 1
        elif text in (')', ']'):
            parens -= 1
        elif parens == 0 and text == '<':
            depth += 1
        elif parens == 0 and text == '>':
            depth -= 1
            if depth == 0:
                return i
    return -1


def _strip_noise(tokens: List[Token]) -> List[Token]:
    """Drop template headers, attributes and compiler extensions."""
    result = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        nxt = tokens[i + 1].text if i + 1 < len(tokens) else ''
        if tok.text == 'template' and nxt == '<':
            end = _find_template_close(tokens, i + 1)
            i = end + 1 if end >= 0 else len(tokens)
            continue
        if tok.text in NOISE_WITH_ARGS and nxt == '(':
            end = _find_closing(tokens, i + 1, '(', ')')
            i = end + 1 if end >= 0 else len(tokens)
            continue
        if tok.text == '[' and nxt == '[':
            end = _find_closing(tokens, i, '[', ']')
            i = end + 1 if end >= 0 else len(tokens)
            continue
        if tok.text in NOISE_WORDS:
            i += 1
            continue
        result.append(tok)
        i += 1
    return result


def _is_single_name(tokens: List[Token]) -> bool:
    """True for 'Name', 'ns::Name' or 'Name<T>'; False for 'stat st'."""
    depth = 0
    expect_word = True
    for tok in tokens:
        if tok.text == '<':
            depth += 1
        elif tok.text == '>':
            depth -= 1
        elif depth > 0:
            continue
        elif tok.text == '::':
            expect_word = True
        elif tok.kind == 'word' and expect_word:
            expect_word = False
        else:
            return False
    return bool(tokens) and depth == 0 and not expect_word


def _top_level_index(tokens: List[Token], text: str) -> int:
    depth = 0
    for i, tok in enumerate(tokens):
        if tok.text in ('(', '[', '{'):
            if depth == 0 and tok.text == text:
                return i
            depth += 1
        elif tok.text in (')', ']', '}'):
            depth -= 1
        elif depth == 0 and tok.text == text:
            if text == '=' and i > 0 and tokens[i - 1].text in ('operator', '=', '!', '<', '>'):
                continue
            if text == '=' and i + 1 < len(tokens) and tokens[i + 1].text == '=':
                continue
            return i
    return -1


def _parameter_name_index(part: List[Token]) -> int:
    """
    Index of the declared name in one parameter, or -1 for an unnamed one.
    Handles 'int n', 'int values[4]', 'const T (&arr)[N]' and 'void (*cb)(int)'.
    """
    end = len(part)
    while end > 0 and part[end - 1].text == ']':
        depth = 0
        for k in range(end - 1, -1, -1):
            if part[k].text == ']':
                depth += 1
            elif part[k].text == '[':
                depth -= 1
                if depth == 0:
                    end = k
                    break
        else:
            return -1

    if end > 1 and part[end - 1].kind == 'word' and part[end - 2].text != '::' \
            and part[end - 1].text not in BUILTIN_TYPE_WORDS:
        return end - 1

    for k in range(end - 1):
        if part[k].text == '(' and part[k + 1].text in ('*', '&'):
            close = _find_closing(part, k, '(', ')')
            words = [j for j in range(k + 1, close) if part[j].kind == 'word']
            return words[-1] if close > 0 and words else -1
    return -1


class DeclarationParser(BaseParser):
    """Default parser: collects declarations from one preprocessed file."""

    def __init__(self, only_primary_file: bool = True):
        self.only_primary_file = only_primary_file

    @staticmethod
    def get_name() -> str:
        return "Declaration scanner"

    def parse(self, table: SymbolTable, source_file_name: Path, stream: BinaryIO) -> None:
        text = stream.read().decode('utf-8', errors='replace')
        run = _ParseRun(table, Path(source_file_name), self.only_primary_file)
        run.tokenize(text)
        run.parse()
        logger.debug(f"{source_file_name}: {run.recorded} declarations recorded")


class _ParseRun:
    def __init__(self, table: SymbolTable, source_file: Path, only_primary_file: bool):
        self.table = table
        self.source_file = source_file
        self.source_abs = os.path.normcase(os.path.abspath(str(source_file)))
        self.only_primary_file = only_primary_file
        self.tokens: List[Token] = []
        self.scopes: List[Scope] = [Scope('namespace', '')]
        self.recorded = 0
        self._seen_marker = False
        self._primary_cache = {}

    # --- tokenizing ---

    def tokenize(self, text: str):
        current_file = str(self.source_file)
        line = 1
        for match in TOKEN_RE.finditer(text):
            kind = match.lastgroup
            value = match.group()
            if kind == 'newline':
                line += 1
                continue
            if kind in ('space', 'comment'):
                line += value.count('\n')
                continue
            if kind == 'marker':
                marker = LINE_MARKER_RE.match(value)
                if marker:
                    self._seen_marker = True
                    # the marker names the line that follows it
                    line = int(marker.group(1)) - 1
                    if marker.group(2) is not None:
                        current_file = marker.group(2).replace('\\\\', '\\')
                continue
            self.tokens.append(Token(kind, value, current_file, line))
            line += value.count('\n')

    def is_primary(self, tok: Token) -> bool:
        if not self.only_primary_file or not self._seen_marker:
            return True
        cached = self._primary_cache.get(tok.file)
        if cached is None:
            cached = self._same_file(tok.file)
            self._primary_cache[tok.file] = cached
        return cached

    def _same_file(self, file_name: str) -> bool:
        if file_name.startswith('<'):
            return False
        if os.path.isabs(file_name):
            return os.path.normcase(os.path.normpath(file_name)) == self.source_abs
        relative = os.path.normcase(os.path.normpath(file_name))
        return self.source_abs == relative or self.source_abs.endswith(os.sep + relative)

    # --- statement loop ---

    def parse(self):
        tokens = self.tokens
        stmt: List[Token] = []
        doc: List[str] = []
        paren_depth = 0
        i = 0
        while i < len(tokens):
            tok = tokens[i]
            text = tok.text

            if tok.kind == 'doc':
                if not stmt:
                    doc.append(clean_doc_comment(text))
                i += 1
                continue

            if paren_depth > 0:
                stmt.append(tok)
                if text == '(':
                    paren_depth += 1
                elif text == ')':
                    paren_depth -= 1
                i += 1
                continue

            if text == '(':
                paren_depth = 1
                stmt.append(tok)
            elif text == ';':
                self.statement(stmt, doc)
                stmt, doc = [], []
            elif text == '{':
                i, keep = self.open_brace(stmt, doc, i)
                if keep:
                    stmt.append(Token('punct', '{}', tok.file, tok.line))
                else:
                    stmt, doc = [], []
                continue
            elif text == '}':
                i = self.close_brace(tok, i)
                stmt, doc = [], []
                continue
            elif text == ':' and len(stmt) == 1 and stmt[0].text in ACCESS_SPECIFIERS:
                self.scopes[-1].access = stmt[0].text
                stmt, doc = [], []
            else:
                stmt.append(tok)
            i += 1

        if len(self.scopes) > 1:
            last = tokens[-1] if tokens else None
            raise ParseError("unexpected end of input, missing '}'", self.source_file,
                             last.line if last else 0)

    def skip_block(self, i: int) -> int:
        """tokens[i] is '{'; return the index after its matching '}'."""
        end = _find_closing(self.tokens, i, '{', '}')
        if end < 0:
            raise ParseError("unexpected end of input, missing '}'", self.source_file,
                             self.tokens[i].line)
        return end + 1

    def skip_to_semicolon(self, i: int) -> int:
        while i < len(self.tokens) and self.tokens[i].text != ';':
            if self.tokens[i].text == '{':
                i = self.skip_block(i)
                continue
            i += 1
        return i + 1

    @property
    def scope(self) -> Scope:
        return self.scopes[-1]

    def qualify(self, name: str, scope_name: Optional[str] = None) -> str:
        scope_name = self.scope.qualified_name if scope_name is None else scope_name
        return f"{scope_name}::{name}" if scope_name else name

    # --- braces ---

    def open_brace(self, stmt: List[Token], doc: List[str], i: int) -> Tuple[int, bool]:
        """Handle '{'. Returns the next token index and whether the statement continues."""
        tokens = _strip_noise(stmt)
        head = [t.text for t in tokens]

        if head[:1] == ['inline'] and head[1:2] == ['namespace']:
            tokens, head = tokens[1:], head[1:]

        if head[:1] == ['namespace']:
            self.open_namespace(tokens[1:], doc)
            return i + 1, False

        if head[:1] == ['extern'] and len(tokens) == 2 and tokens[1].kind == 'string':
            self.scopes.append(Scope('transparent', self.scope.qualified_name))
            return i + 1, False

        no_call = _top_level_index(tokens, '(') < 0 and _top_level_index(tokens, '=') < 0

        if head[:1] and head[0] in CLASS_KEYS and no_call:
            return self.open_class(tokens, doc, i), False

        if head[:1] == ['enum'] and no_call:
            return self.parse_enum(tokens, doc, i), False

        if _top_level_index(tokens, '=') < 0 and _top_level_index(tokens, '(') >= 0:
            close = _find_closing(tokens, _top_level_index(tokens, '('), '(', ')')
            in_ctor_init = close >= 0 and any(t.text == ':' for t in tokens[close + 1:])
            if not (in_ctor_init and tokens[-1].kind == 'word'):
                self.function(tokens, doc, is_definition=True)
                return self.skip_block(i), False

        # braced initializer: skip it and keep collecting the declaration
        return self.skip_block(i), True

    def close_brace(self, tok: Token, i: int) -> int:
        if len(self.scopes) == 1:
            raise ParseError("unbalanced '}'", self.source_file, tok.line)
        closed = self.scopes.pop()
        if closed.close_with_semicolon:
            after = self.skip_to_semicolon(i + 1)
            if closed.declared_type:
                self.trailing_declarators(self.tokens[i + 1:after - 1], closed.declared_type, [])
            return after
        return i + 1

    def open_namespace(self, tokens: List[Token], doc: List[str]):
        names = [t for t in tokens if t.kind == 'word' and t.text != 'inline']
        if not names:
            # anonymous namespace: members stay in the enclosing scope
            self.scopes.append(Scope('transparent', self.scope.qualified_name))
            return

        # 'namespace a::b {' opens one scope per component; all close on one '}'
        qualified = self.scope.qualified_name
        for name_tok in names:
            qualified = self.qualify(name_tok.text, qualified)
            if self.is_primary(name_tok):
                symbol = NamespaceSymbol()
                self.fill(symbol, name_tok, qualified, doc)
                self.record(symbol)
        self.scopes.append(Scope('namespace', qualified))

    def class_name(self, tokens: List[Token]) -> Tuple[List[Token], int]:
        """Name tokens after the class key (may be qualified), and index of the base-clause ':'."""
        colon = -1
        depth = 0
        for idx, tok in enumerate(tokens):
            if tok.text == '<':
                depth += 1
            elif tok.text == '>':
                depth -= 1
            elif tok.text == ':' and depth == 0:
                colon = idx
                break
        head = tokens[1:colon] if colon >= 0 else tokens[1:]
        head = [t for t in head if t.text != 'final']
        return head, colon

    def open_class(self, tokens: List[Token], doc: List[str], i: int) -> int:
        """tokens[i] is the class body's '{'; returns the next token index."""
        kind = SymbolKind(tokens[0].text)
        name_tokens, colon = self.class_name(tokens)
        default_access = 'private' if kind == SymbolKind.CLASS else 'public'

        words = [t for t in name_tokens if t.kind == 'word']
        if not words:
            end = self.skip_block(i)
            if next((t.text for t in self.tokens[end:] if t.kind != 'doc'), ';') != ';':
                # 'struct { int a; } value;': the members belong to the unnamed type
                after = self.skip_to_semicolon(end)
                self.trailing_declarators(self.tokens[end:after - 1], f"{kind.value} {{...}}", doc)
                return after
            # anonymous struct/union: members belong to the enclosing scope
            self.scopes.append(Scope('transparent', self.scope.qualified_name, default_access, True))
            return i + 1

        name = join_tokens(name_tokens)
        qualified = self.qualify(name)
        name_tok = words[-1]

        if self.is_primary(name_tok):
            symbol = ClassSymbol(kind)
            self.fill(symbol, name_tok, qualified, doc)
            if colon >= 0:
                for base in _split_top_level(tokens[colon + 1:]):
                    base = [t for t in base if t.text not in ACCESS_SPECIFIERS + ('virtual',)]
                    if base:
                        symbol.base_classes.append(join_tokens(base))
            self.record(symbol)

        self.scopes.append(Scope('class', qualified, default_access, True, declared_type=name))
        return i + 1

    def parse_enum(self, tokens: List[Token], doc: List[str], i: int) -> int:
        end = self.skip_block(i)
        body = self.tokens[i + 1:end - 1]
        head = tokens[1:]
        symbol = EnumSymbol()
        if head and head[0].text in ('class', 'struct'):
            symbol.is_scoped = True
            head = head[1:]
        colon = _top_level_index(head, ':')
        if colon >= 0:
            head = head[:colon]
        words = [t for t in head if t.kind == 'word']

        if words and self.is_primary(words[-1]):
            self.fill(symbol, words[-1], self.qualify(words[-1].text), doc)
            for enumerator in _split_top_level([t for t in body if t.kind != 'doc'], angles=False):
                assign = _top_level_index(enumerator, '=')
                name = enumerator[0].text
                value = join_tokens(enumerator[assign + 1:]) if assign >= 0 else ''
                symbol.enum_values.append((name, value))
            self.record(symbol)

        return self.skip_to_semicolon(end)

    # --- statements ---

    def statement(self, stmt: List[Token], doc: List[str]):
        tokens = _strip_noise(stmt)
        if not tokens:
            return
        if tokens[0].text == 'extern' and len(tokens) > 1 and tokens[1].kind == 'string':
            tokens = tokens[2:]
            if not tokens:
                return
        first = tokens[0].text

        if first in IGNORED_STATEMENTS:
            return
        if first == 'using':
            self.alias(tokens, doc)
        elif first == 'typedef':
            self.typedef(tokens, doc)
        elif first in CLASS_KEYS and _is_single_name([t for t in tokens[1:] if t.text != 'final']):
            self.forward_class(tokens, doc)
        elif first == 'enum' and _top_level_index(tokens, '=') < 0:
            self.forward_enum(tokens, doc)
        elif self.is_function_declaration(tokens):
            self.function(tokens, doc, is_definition=False)
        else:
            self.variables(tokens, doc)

    def is_function_declaration(self, tokens: List[Token]) -> bool:
        paren = _top_level_index(tokens, '(')
        if paren <= 0:
            return False
        assign = _top_level_index(tokens, '=')
        if 0 <= assign < paren:
            return False
        # 'void (*handler)(int);' declares a function pointer variable
        return tokens[paren + 1].text not in ('*', '&') if paren + 1 < len(tokens) else True

    def forward_class(self, tokens: List[Token], doc: List[str]):
        name_tokens, _ = self.class_name(tokens)
        words = [t for t in name_tokens if t.kind == 'word']
        if not words or not self.is_primary(words[-1]):
            return
        symbol = ClassSymbol(SymbolKind(tokens[0].text))
        qualified = self.qualify(join_tokens(name_tokens))
        self.fill(symbol, words[-1], qualified, doc)
        symbol.is_forward = True
        self.record(symbol)

    def forward_enum(self, tokens: List[Token], doc: List[str]):
        head = tokens[1:]
        scoped = bool(head) and head[0].text in ('class', 'struct')
        if scoped:
            head = head[1:]
        colon = _top_level_index(head, ':')
        if colon >= 0:
            head = head[:colon]
        if len(head) != 1 or head[0].kind != 'word' or not self.is_primary(head[0]):
            return
        symbol = EnumSymbol()
        symbol.is_scoped = scoped
        symbol.is_forward = True
        self.fill(symbol, head[0], self.qualify(head[0].text), doc)
        self.record(symbol)

    def alias(self, tokens: List[Token], doc: List[str]):
        # 'using Name = Type;' only; using-directives and using-declarations are skipped
        if len(tokens) < 4 or tokens[1].kind != 'word' or tokens[2].text != '=':
            return
        if not self.is_primary(tokens[1]):
            return
        symbol = TypedefSymbol()
        self.fill(symbol, tokens[1], self.qualify(tokens[1].text), doc)
        symbol.aliased_type = join_tokens(tokens[3:])
        self.record(symbol)

    def typedef(self, tokens: List[Token], doc: List[str]):
        body = tokens[1:]
        paren = _top_level_index(body, '(')
        name_tok = None
        if paren >= 0:
            # function pointer: typedef void (*Name)(int);
            close = _find_closing(body, paren, '(', ')')
            inner = [t for t in body[paren:close] if t.kind == 'word']
            name_tok = inner[-1] if inner else None
        else:
            for declarator in _split_top_level(body)[:1]:
                words = [t for t in declarator if t.kind == 'word']
                name_tok = words[-1] if len(words) >= 2 else None
        if name_tok is None or not self.is_primary(name_tok):
            return
        symbol = TypedefSymbol()
        self.fill(symbol, name_tok, self.qualify(name_tok.text), doc)
        symbol.aliased_type = join_tokens([t for t in body if t is not name_tok])
        self.record(symbol)

    def variables(self, tokens: List[Token], doc: List[str]):
        declarators = _split_top_level(tokens)
        if not declarators:
            return

        first = declarators[0]
        cut = len(first)
        for marker in ('=', '[', ':', '{}'):
            idx = _top_level_index(first, marker)
            if 0 <= idx < cut:
                cut = idx
        first = first[:cut]
        words = [t for t in first if t.kind == 'word']
        if len(first) < 2 or len(words) < 2 or first[-1].kind != 'word':
            return

        type_tokens = [t for t in first[:-1] if t.text not in DECL_SPECIFIERS]
        var_type = join_tokens(type_tokens)
        base_type = join_tokens([t for t in type_tokens if t.text not in ('*', '&')])

        self.variable(first[-1], var_type, doc)
        for declarator in declarators[1:]:
            names = [t for t in declarator if t.kind == 'word']
            if names:
                self.variable(names[0], base_type, doc)

    def trailing_declarators(self, tokens: List[Token], var_type: str, doc: List[str]):
        """Variables declared between a class body's '}' and its ';'."""
        for declarator in _split_top_level(_strip_noise([t for t in tokens if t.kind != 'doc'])):
            names = [t for t in declarator if t.kind == 'word' and t.text not in ('const', 'volatile')]
            if names:
                self.variable(names[0], var_type, doc)

    def variable(self, name_tok: Token, var_type: str, doc: List[str]):
        if not self.is_primary(name_tok):
            return
        symbol = VariableSymbol()
        self.fill(symbol, name_tok, self.qualify(name_tok.text), doc)
        symbol.var_type = var_type
        self.record(symbol)

    def function(self, tokens: List[Token], doc: List[str], is_definition: bool):
        paren = self.parameter_list_start(tokens)
        if paren <= 0:
            return
        close = _find_closing(tokens, paren, '(', ')')
        if close < 0:
            raise ParseError("unbalanced '(' in declaration", self.source_file, tokens[paren].line)

        name_start = paren - 1
        if 'operator' in [t.text for t in tokens[:paren]]:
            name_start = [t.text for t in tokens[:paren]].index('operator')
        elif tokens[name_start].kind != 'word':
            return
        if name_start > 0 and tokens[name_start - 1].text == '~':
            name_start -= 1
        name_tok = tokens[paren - 1] if tokens[paren - 1].kind == 'word' else tokens[name_start]
        name = self.function_name(tokens[name_start:paren])

        # explicit qualification: 'void Widget::resize(...)'
        qual_start = name_start
        while qual_start >= 2 and tokens[qual_start - 1].text == '::' and tokens[qual_start - 2].kind == 'word':
            qual_start -= 2
        qualifier = ''.join(t.text for t in tokens[qual_start:name_start]).rstrip(':')

        if not self.is_primary(name_tok):
            return

        symbol = FunctionSymbol()
        symbol.parameters = self.parameters(tokens[paren + 1:close])
        trailing = tokens[close + 1:]
        arrow = next((k for k, t in enumerate(trailing) if t.text == '->'), -1)
        if arrow >= 0:
            symbol.return_type = join_tokens([t for t in trailing[arrow + 1:] if t.text not in TRAILING_QUALIFIERS])
            trailing = trailing[:arrow]
        else:
            symbol.return_type = join_tokens([t for t in tokens[:qual_start] if t.text not in DECL_SPECIFIERS])
        symbol.qualifiers = [t.text for t in trailing if t.text in TRAILING_QUALIFIERS]
        if [t.text for t in trailing[-2:]] == ['=', '0']:
            symbol.qualifiers.append('= 0')

        scope_name = self.qualify(qualifier) if qualifier else self.scope.qualified_name
        owner = self.table.get_symbol(scope_name)
        symbol.is_member = self.scope.is_class or (owner is not None and owner.is_class_like())
        symbol.class_name = scope_name if symbol.is_member else ''
        symbol.is_definition = is_definition

        qualified = self.qualify(f"{name}({symbol.get_parameter_types()})", scope_name)
        self.fill(symbol, name_tok, qualified, doc)
        symbol.name = name
        symbol.scope = scope_name

        stored = self.record(symbol)
        if is_definition and stored is not symbol:
            stored.is_definition = True

    @staticmethod
    def function_name(tokens: List[Token]) -> str:
        if tokens[0].text == 'operator' and len(tokens) > 1 and tokens[1].kind == 'word':
            # conversion and allocation operators: 'operator bool', 'operator new'
            return 'operator ' + join_tokens(tokens[1:])
        return ''.join(t.text for t in tokens)

    def parameter_list_start(self, tokens: List[Token]) -> int:
        texts = [t.text for t in tokens]
        if 'operator' in texts:
            op = texts.index('operator')
            # 'operator()' names the call operator; its parameters follow
            if texts[op + 1:op + 3] == ['(', ')']:
                return op + 3 if op + 3 < len(tokens) and texts[op + 3] == '(' else -1
            return texts.index('(', op + 1) if '(' in texts[op + 1:] else -1
        return _top_level_index(tokens, '(')

    def parameters(self, tokens: List[Token]) -> List[tuple]:
        params = []
        parts = _split_top_level(tokens)
        if len(parts) == 1 and [t.text for t in parts[0]] == ['void']:
            return params
        for part in parts:
            assign = _top_level_index(part, '=')
            if assign >= 0:
                part = part[:assign]
            part = [t for t in part if t.text != 'register']
            name_at = _parameter_name_index(part)
            if name_at >= 0:
                params.append((join_tokens(part[:name_at] + part[name_at + 1:]), part[name_at].text))
            else:
                params.append((join_tokens(part), ''))
        return params

    # --- recording ---

    def fill(self, symbol: BaseSymbol, name_tok: Token, qualified: str, doc: List[str]):
        symbol.scope, symbol.name = split_qualified(qualified)
        symbol.qualified_name = qualified
        symbol.file_path = name_tok.file
        symbol.line_start = name_tok.line
        symbol.doc = '\n'.join(d for d in doc if d)
        if self.scope.is_class or self.scope.kind == 'transparent':
            symbol.access = self.scope.access

    def record(self, symbol: BaseSymbol) -> BaseSymbol:
        self.recorded += 1
        return self.table.add(symbol)
