"""Go build constraint evaluation."""

from __future__ import annotations

import platform
import re
import sys
from typing import Iterable, List, Optional, Sequence

KNOWN_OS = frozenset(
    {
        "aix",
        "android",
        "darwin",
        "dragonfly",
        "freebsd",
        "hurd",
        "illumos",
        "ios",
        "js",
        "linux",
        "nacl",
        "netbsd",
        "openbsd",
        "plan9",
        "solaris",
        "wasip1",
        "windows",
        "zos",
    }
)

KNOWN_ARCH = frozenset(
    {
        "386",
        "amd64",
        "amd64p32",
        "arm",
        "armbe",
        "arm64",
        "arm64be",
        "loong64",
        "mips",
        "mipsle",
        "mips64",
        "mips64le",
        "mips64p32",
        "mips64p32le",
        "ppc",
        "ppc64",
        "ppc64le",
        "riscv",
        "riscv64",
        "s390",
        "s390x",
        "sparc",
        "sparc64",
        "wasm",
    }
)

_GOOS_BY_PLATFORM = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "aix": "aix",
}

_GOARCH_BY_MACHINE = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}

_RELEASE_TAG = re.compile(r"^go1(\.\d+)*$")
_EXPR_TOKEN = re.compile(r"\s*(\|\||&&|!|\(|\)|[A-Za-z0-9_.]+)")


def host_goos() -> str:
    for prefix, goos in _GOOS_BY_PLATFORM.items():
        if sys.platform.startswith(prefix):
            return goos
    return sys.platform


def host_goarch() -> str:
    machine = platform.machine().lower()
    return _GOARCH_BY_MACHINE.get(machine, machine)


def default_build_tags() -> List[str]:
    """Return the tags used when none are configured: the host GOARCH and GOOS."""
    return [host_goarch(), host_goos()]


class BuildContext:
    """Evaluates file name and comment build constraints against a tag set.

    An empty or missing ``build_tags`` falls back to the host GOARCH and GOOS.
    ``cgo_enabled`` makes the ``cgo`` tag hold, as in the default Go toolchain.
    """

    def __init__(self, build_tags: Optional[Iterable[str]] = None, cgo_enabled: bool = True) -> None:
        tags = [tag for tag in (build_tags or ()) if tag]
        self.tags = frozenset(tags or default_build_tags())
        self.cgo_enabled = cgo_enabled

    def match_tag(self, tag: str) -> bool:
        if tag in self.tags or tag == "gc":
            return True
        if tag == "cgo":
            return self.cgo_enabled
        return bool(_RELEASE_TAG.match(tag))

    def good_os_arch_file(self, filename: str) -> bool:
        """Check the ``_GOOS``, ``_GOARCH`` and ``_GOOS_GOARCH`` file name suffixes."""
        name = filename.split(".", 1)[0]
        index = name.find("_")
        if index < 0:
            return True
        parts = name[index:].split("_")
        if parts and parts[-1] == "test":
            parts = parts[:-1]
        n = len(parts)
        if n >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
            return self.match_tag(parts[-2]) and self.match_tag(parts[-1])
        if n >= 1 and (parts[-1] in KNOWN_OS or parts[-1] in KNOWN_ARCH):
            return self.match_tag(parts[-1])
        return True

    def satisfies(self, go_build: Optional[str], plus_build: Sequence[str]) -> bool:
        """Evaluate a file's constraint comments.

        ``go_build`` is the expression of a ``//go:build`` line and takes
        precedence over the ``// +build`` lines, each of which must hold.
        Raises ``ValueError`` on a malformed expression.
        """
        if go_build is not None:
            return _ExprParser(go_build, self.match_tag).parse()
        return all(self._eval_plus_build(line) for line in plus_build)

    def _eval_plus_build(self, line: str) -> bool:
        # Space separated options are ORed, comma separated terms are ANDed.
        for option in line.split():
            if all(self._eval_term(term) for term in option.split(",")):
                return True
        return False

    def _eval_term(self, term: str) -> bool:
        if term.startswith("!!"):
            return False
        if term.startswith("!"):
            return not self.match_tag(term[1:])
        return self.match_tag(term)


class _ExprParser:
    """Recursive-descent parser for ``//go:build`` expressions."""

    def __init__(self, text: str, match_tag) -> None:  # type: ignore[no-untyped-def]
        self.text = text
        self.tokens = self._tokenize(text)
        self.pos = 0
        self.match_tag = match_tag

    def _tokenize(self, text: str) -> List[str]:
        tokens: List[str] = []
        index = 0
        stripped = text.rstrip()
        while index < len(stripped):
            match = _EXPR_TOKEN.match(stripped, index)
            if match is None:
                raise ValueError(f"invalid //go:build expression: {text!r}")
            tokens.append(match.group(1))
            index = match.end()
        return tokens

    def parse(self) -> bool:
        if not self.tokens:
            raise ValueError("empty //go:build expression")
        value = self._or()
        if self.pos != len(self.tokens):
            raise ValueError(f"unexpected token {self.tokens[self.pos]!r} in //go:build expression")
        return value

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _or(self) -> bool:
        value = self._and()
        while self._peek() == "||":
            self.pos += 1
            right = self._and()
            value = value or right
        return value

    def _and(self) -> bool:
        value = self._not()
        while self._peek() == "&&":
            self.pos += 1
            right = self._not()
            value = value and right
        return value

    def _not(self) -> bool:
        token = self._peek()
        if token is None:
            raise ValueError(f"unexpected end of //go:build expression: {self.text!r}")
        self.pos += 1
        if token == "!":
            return not self._not()
        if token == "(":
            value = self._or()
            if self._peek() != ")":
                raise ValueError(f"missing ')' in //go:build expression: {self.text!r}")
            self.pos += 1
            return value
        if token in {")", "&&", "||"}:
            raise ValueError(f"unexpected token {token!r} in //go:build expression")
        return bool(self.match_tag(token))


__all__ = [
    "BuildContext",
    "KNOWN_ARCH",
    "KNOWN_OS",
    "default_build_tags",
    "host_goarch",
    "host_goos",
]
