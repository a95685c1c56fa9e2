#!/usr/bin/env python3

from abc import ABC
from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

@unique
class Opcode(Enum):
    VARINT = 'VARINT'       # var <- int
    VARLIST = 'VARLIST'     # var <- [args...]
    COMBINE = 'COMBINE'     # list2 <- list1 ++ list2
    GET = 'GET'             # var <- list[i]
    SET = 'SET'             # list[i] <- var
    COPY = 'COPY'           # list1 <- deep copy of list2
    CHS = 'CHS'             # var <- -var
    ADD = 'ADD'             # var <- var + operand
    IF = 'IF'               # if var is 0 or [] goto i
    HLT = 'HLT'             # halt

# None means variadic
arity: dict[Opcode, Optional[int]] = {
    Opcode.VARINT: 2,
    Opcode.VARLIST: None,
    Opcode.COMBINE: 2,
    Opcode.GET: 3,
    Opcode.SET: 3,
    Opcode.COPY: 2,
    Opcode.CHS: 1,
    Opcode.ADD: 2,
    Opcode.IF: 2,
    Opcode.HLT: 0,
}

@dataclass(frozen=True)
class Instruction(ABC):
    pass

@dataclass(frozen=True)
class VarInt(Instruction):
    var: str
    value: int

@dataclass(frozen=True)
class VarList(Instruction):
    var: str
    args: list[str]

@dataclass(frozen=True)
class Combine(Instruction):
    first: str
    second: str

@dataclass(frozen=True)
class Get(Instruction):
    dest: str
    index: int
    seq: str

@dataclass(frozen=True)
class Set(Instruction):
    source: str
    index: int
    seq: str

@dataclass(frozen=True)
class Copy(Instruction):
    dest: str
    source: str

@dataclass(frozen=True)
class Chs(Instruction):
    var: str

@dataclass(frozen=True)
class Add(Instruction):
    var: str
    operand: str

@dataclass(frozen=True)
class If(Instruction):
    var: str
    target: int

@dataclass(frozen=True)
class Hlt(Instruction):
    pass

class WLError(RuntimeError):
    pass

class DecodeError(WLError):
    pass

class UndefinedVariable(WLError):
    pass

class TypeMismatch(WLError):
    pass

class IndexOutOfRange(WLError):
    pass
