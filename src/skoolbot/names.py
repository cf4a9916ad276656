"""Identifier allocation for generated Skoolbot code."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class NameKind(Enum):
    VARIABLE = "VARIABLE"
    PROCEDURE = "PROCEDURE"
    HELPER = "HELPER"


# Keywords plus the standard globals a generated program may touch.
RESERVED_WORDS: frozenset[str] = frozenset(
    # Special case
    "_,__inext,assert,bit,colors,colours,coroutine,debug,dofile,error,"
    "gcinfo,getfenv,getmetatable,io,ipairs,load,loadfile,loadstring,math,"
    "module,next,os,package,pairs,pcall,print,rawequal,rawget,rawlen,rawset,"
    "require,select,setfenv,setmetatable,string,table,tonumber,tostring,"
    "type,unpack,xpcall,"
    # Keywords
    "and,break,do,else,elseif,end,false,for,function,goto,if,in,local,nil,"
    "not,or,repeat,return,then,true,until,while".split(",")
)

_NON_WORD = re.compile(r"[^\w]", re.ASCII)


class NameResolver(Protocol):
    """What the emitters need from a naming service."""

    def get_name(self, name: str, kind: NameKind) -> str: ...

    def get_distinct_name(self, name: str, kind: NameKind) -> str: ...


def safe_name(name: str) -> str:
    """Turn arbitrary user text into a legal identifier."""
    if not name:
        return "unnamed"
    name = _NON_WORD.sub("_", name.replace(" ", "_"))
    if name[0].isdigit():
        name = "my_" + name
    return name


class NameDB:
    """Hands out identifiers that collide neither with each other nor with
    reserved words.

    ``get_name`` is stable: the same user name (compared case-insensitively)
    and kind always map to the same identifier within one pass.
    """

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._reserved = set(RESERVED_WORDS)
        self._reserved.update(reserved)
        self._names: dict[tuple[str, NameKind], str] = {}
        self._taken: set[str] = set()

    def reset(self) -> None:
        self._names.clear()
        self._taken.clear()

    def is_reserved(self, name: str) -> bool:
        return name in self._reserved

    def get_name(self, name: str, kind: NameKind = NameKind.VARIABLE) -> str:
        key = (name.lower(), kind)
        existing = self._names.get(key)
        if existing is not None:
            return existing
        ident = self.get_distinct_name(name, kind)
        self._names[key] = ident
        return ident

    def get_distinct_name(self, name: str, kind: NameKind = NameKind.VARIABLE) -> str:
        base = safe_name(name)
        candidate = base
        suffix = 1
        while candidate in self._taken or candidate in self._reserved:
            suffix += 1
            candidate = f"{base}{suffix}"
        self._taken.add(candidate)
        logger.debug("allocated %s name %r for %r", kind.value.lower(), candidate, name)
        return candidate
