"""
Models for the two module manifests found in a module directory.

``go.mod`` is parsed into a GoMod that can be rendered back in canonical form:

    module github.com/user/repo

    go 1.21

    require (
    	github.com/goplus/gop v1.2.6
    	golang.org/x/mod v0.14.0 // indirect
    )

    replace github.com/goplus/gop => /opt/gop

Directives other than module/go/toolchain/require/replace (exclude, retract,
godebug, ...) are preserved verbatim after the known ones.

``gop.mod`` declares Go+ classfiles. A module is class-type when it carries a
``project`` directive:

    gop 1.2
    project .gmx Game github.com/goplus/spx math
    class .spx Sprite
"""

import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

GO_MOD = "go.mod"
GOP_MOD = "gop.mod"


class ModSyntaxError(ValueError):
    """Raised for malformed manifest text."""

    def __init__(self, filename: str, line_number: int, message: str):
        self.filename = filename
        self.line_number = line_number
        super().__init__(f"{filename}:{line_number}: {message}")


def _strip_comment(line: str) -> Tuple[str, str]:
    code, sep, comment = line.partition("//")
    return code.strip(), comment.strip() if sep else ""


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"`":
        return token[1:-1]
    return token


def _iter_directives(text: str, filename: str):
    """
    Yield (line_number, verb, args, comment, raw) for each directive.

    Lines inside a ``verb ( ... )`` block are yielded with the block's verb.
    ``raw`` is the original block text for the first line of a block and the
    original line otherwise.
    """
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        code, comment = _strip_comment(lines[i])
        i += 1
        if not code:
            continue
        tokens = code.split()
        verb = tokens[0]
        if tokens[-1] == "(" and len(tokens) == 2:
            start = i
            block_lines = [lines[start - 1]]
            closed = False
            while i < len(lines):
                inner, inner_comment = _strip_comment(lines[i])
                block_lines.append(lines[i])
                i += 1
                if inner == ")":
                    closed = True
                    break
                if inner:
                    yield i, verb, inner.split(), inner_comment, None
            if not closed:
                raise ModSyntaxError(filename, start, f"unterminated {verb} block")
            yield start, verb, None, "", "\n".join(block_lines)
            continue
        yield i, verb, tokens[1:], comment, lines[i - 1]


class Require(BaseModel):
    path: str
    version: str
    indirect: bool = False

    def render(self) -> str:
        text = f"{self.path} {self.version}"
        if self.indirect:
            text += " // indirect"
        return text


class Replace(BaseModel):
    old_path: str
    old_version: Optional[str] = None
    new_path: str
    new_version: Optional[str] = None

    def render(self) -> str:
        old = self.old_path if not self.old_version else f"{self.old_path} {self.old_version}"
        new = self.new_path if not self.new_version else f"{self.new_path} {self.new_version}"
        return f"{old} => {new}"


class GoMod(BaseModel):
    """Structured content of a go.mod file."""

    module: Optional[str] = None
    go: Optional[str] = None
    toolchain: Optional[str] = None
    require: List[Require] = Field(default_factory=list)
    replace: List[Replace] = Field(default_factory=list)
    extra: List[str] = Field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "GoMod":
        """
        Parse go.mod text.

        Raises:
            ModSyntaxError: On malformed directives
        """
        mod = cls()
        for line_number, verb, args, comment, raw in _iter_directives(text, GO_MOD):
            if args is None:
                # closing record of a block; only unknown blocks are kept
                if verb not in ("require", "replace"):
                    mod.extra.append(raw)
                continue
            if verb == "module":
                if len(args) != 1:
                    raise ModSyntaxError(GO_MOD, line_number, "usage: module module/path")
                mod.module = _unquote(args[0])
            elif verb == "go":
                if len(args) != 1:
                    raise ModSyntaxError(GO_MOD, line_number, "usage: go 1.23")
                mod.go = args[0]
            elif verb == "toolchain":
                if len(args) != 1:
                    raise ModSyntaxError(GO_MOD, line_number, "usage: toolchain go1.23")
                mod.toolchain = args[0]
            elif verb == "require":
                mod.require.append(_parse_require(args, comment, line_number))
            elif verb == "replace":
                mod.replace.append(_parse_replace(args, line_number))
            elif raw is not None:
                mod.extra.append(raw)
        return mod

    def find_require(self, path: str) -> Optional[Require]:
        for req in self.require:
            if req.path == path:
                return req
        return None

    def set_require(self, path: str, version: str) -> None:
        """Require *path* at exactly *version*, as a direct dependency."""
        self.require = [r for r in self.require if r.path != path]
        self.require.append(Require(path=path, version=version))

    def set_replace(self, old_path: str, new_path: str) -> None:
        self.drop_replace(old_path)
        self.replace.append(Replace(old_path=old_path, new_path=new_path))

    def drop_replace(self, old_path: str) -> None:
        self.replace = [r for r in self.replace if r.old_path != old_path]

    def render(self) -> str:
        """Render the canonical go.mod text."""
        sections = []
        if self.module:
            sections.append(f"module {self.module}")
        if self.go:
            sections.append(f"go {self.go}")
        if self.toolchain:
            sections.append(f"toolchain {self.toolchain}")
        if self.require:
            reqs = sorted(self.require, key=lambda r: (r.path, r.version))
            sections.append(_render_block("require", [r.render() for r in reqs]))
        if self.replace:
            sections.append(_render_block("replace", [r.render() for r in self.replace]))
        sections.extend(self.extra)
        return "\n\n".join(sections) + "\n"


def _render_block(verb: str, entries: List[str]) -> str:
    if len(entries) == 1:
        return f"{verb} {entries[0]}"
    body = "\n".join(f"\t{entry}" for entry in entries)
    return f"{verb} (\n{body}\n)"


def _parse_require(args: List[str], comment: str, line_number: int) -> Require:
    if len(args) != 2:
        raise ModSyntaxError(GO_MOD, line_number, "usage: require module/path v1.2.3")
    return Require(
        path=_unquote(args[0]),
        version=_unquote(args[1]),
        indirect=comment == "indirect" or comment.startswith("indirect;"),
    )


def _parse_replace(args: List[str], line_number: int) -> Replace:
    if "=>" not in args:
        raise ModSyntaxError(GO_MOD, line_number, "usage: replace module/path [v1.2.3] => other/module v1.4")
    arrow = args.index("=>")
    old, new = args[:arrow], args[arrow + 1 :]
    if len(old) not in (1, 2) or len(new) not in (1, 2):
        raise ModSyntaxError(GO_MOD, line_number, "usage: replace module/path [v1.2.3] => other/module v1.4")
    return Replace(
        old_path=_unquote(old[0]),
        old_version=old[1] if len(old) == 2 else None,
        new_path=_unquote(new[0]),
        new_version=new[1] if len(new) == 2 else None,
    )


class Project(BaseModel):
    """A ``project`` directive: the classfile a class-type module provides."""

    ext: Optional[str] = None
    class_name: Optional[str] = None
    pkg_paths: List[str] = Field(default_factory=list)


class ClassDef(BaseModel):
    """A ``class [-embed] [-prefix=P] .ext WorkClass [WorkPrototype]`` directive."""

    ext: str
    class_name: str
    prototype: Optional[str] = None
    flags: List[str] = Field(default_factory=list)


class Import(BaseModel):
    name: Optional[str] = None
    path: str


class GopMod(BaseModel):
    """Structured content of a gop.mod file."""

    gop: Optional[str] = None
    projects: List[Project] = Field(default_factory=list)
    classes: List[ClassDef] = Field(default_factory=list)
    imports: List[Import] = Field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "GopMod":
        """
        Parse gop.mod text.

        Directives this parser does not know are skipped; only ``project``
        decides whether a module is class-type.

        Raises:
            ModSyntaxError: On malformed gop, project, class or import directives
        """
        mod = cls()
        for line_number, verb, args, _comment, _raw in _iter_directives(text, GOP_MOD):
            if args is None:
                continue
            if verb == "gop":
                if len(args) != 1:
                    raise ModSyntaxError(GOP_MOD, line_number, "usage: gop 1.2")
                mod.gop = args[0]
            elif verb == "project":
                mod.projects.append(_parse_project(args, line_number))
            elif verb == "class":
                if not mod.projects:
                    raise ModSyntaxError(GOP_MOD, line_number, "class must be declared after project")
                mod.classes.append(_parse_class(args, line_number))
            elif verb in ("import", "register"):
                if len(args) not in (1, 2):
                    raise ModSyntaxError(GOP_MOD, line_number, f"usage: {verb} [name] pkg/path")
                name = args[0] if len(args) == 2 else None
                mod.imports.append(Import(name=name, path=_unquote(args[-1])))
            else:
                logger.debug(f"{GOP_MOD}:{line_number}: skipping unknown directive {verb}")
        return mod


def _parse_project(args: List[str], line_number: int) -> Project:
    if args and args[0].startswith("."):
        if len(args) < 3:
            raise ModSyntaxError(GOP_MOD, line_number, "usage: project [.ext ClassName] pkgPath ...")
        return Project(ext=args[0], class_name=args[1], pkg_paths=[_unquote(a) for a in args[2:]])
    if not args:
        raise ModSyntaxError(GOP_MOD, line_number, "usage: project [.ext ClassName] pkgPath ...")
    return Project(pkg_paths=[_unquote(a) for a in args])


def _parse_class(args: List[str], line_number: int) -> ClassDef:
    flags = []
    while args and args[0].startswith("-"):
        flags.append(args[0])
        args = args[1:]
    if len(args) not in (2, 3) or not args[0].startswith("."):
        raise ModSyntaxError(
            GOP_MOD, line_number, "usage: class [-embed] [-prefix=Prefix] .ext WorkClass [WorkPrototype]"
        )
    return ClassDef(
        ext=args[0],
        class_name=args[1],
        prototype=args[2] if len(args) == 3 else None,
        flags=flags,
    )
