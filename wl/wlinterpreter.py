#!/usr/bin/env python3

import itertools

from collections.abc import Sequence
from enum import Enum
from functools import singledispatchmethod
from typing import NamedTuple, Optional

import wlparser

from wlast import *
from wlvalue import Integer, List, Value

class State(Enum):
    RUNNING = 'running'
    HALTED = 'halted'
    FAULTED = 'faulted'

Snapshot = NamedTuple('Snapshot', [('pc', int), ('memory', dict[str, Value])])

_ZERO = Integer(0)

class Vm:
    def __init__(self, lines: Sequence[str] = ()):
        self.load(lines)

    def load(self, lines: Sequence[str]):
        self.prog: list[str] = list(lines)
        self.memory: dict[str, Value] = {}
        self.pc = 0
        self.state = State.RUNNING
        self.fault: Optional[WLError] = None
        self.steps = 0

    def snapshot(self) -> Snapshot:
        return Snapshot(self.pc, dict(self.memory))

    def step(self) -> State:
        if self.state != State.RUNNING:
            return self.state
        if not 0 <= self.pc < len(self.prog):
            self.state = State.HALTED
            return self.state
        try:
            inst = wlparser.decode(self.prog[self.pc])
            self.pc = self.execute(inst)
        except WLError as e:
            self.fault = e
            self.state = State.FAULTED
        else:
            self.steps += 1
        return self.state

    def run(self, max_steps: Optional[int] = None) -> State:
        """Step until the machine halts or faults.

        With ``max_steps`` set, give up after that many calls to ``step``
        and leave the machine running.
        """
        budget = itertools.count() if max_steps is None else range(max_steps)
        for _ in budget:
            if self.step() != State.RUNNING:
                break
        return self.state

    def _lookup(self, var: str) -> Value:
        try:
            return self.memory[var]
        except KeyError:
            raise UndefinedVariable(f'variable `{var}` not defined') from None

    def _resolve(self, token: str) -> Value:
        value = self.memory.get(token)
        if value is not None:
            return value
        literal = wlparser.int_literal(token)
        if literal is None:
            raise UndefinedVariable(f'variable `{token}` not defined')
        return Integer(literal)

    @singledispatchmethod
    def execute(self, _: Instruction) -> int:
        raise NotImplementedError

    @execute.register
    def _(self, inst: VarInt) -> int:
        self.memory[inst.var] = Integer(inst.value)
        return self.pc + 1

    @execute.register
    def _(self, inst: VarList) -> int:
        items = [self._resolve(arg) for arg in inst.args]
        self.memory[inst.var] = List(items)
        return self.pc + 1

    @execute.register
    def _(self, inst: Combine) -> int:
        first = self.memory.get(inst.first)
        second = self.memory.get(inst.second)
        if isinstance(first, List) and isinstance(second, List):
            self.memory[inst.second] = first.concat(second)
        return self.pc + 1

    @execute.register
    def _(self, inst: Get) -> int:
        seq = self._lookup(inst.seq).as_list()
        self.memory[inst.dest] = seq.get(inst.index)
        return self.pc + 1

    @execute.register
    def _(self, inst: Set) -> int:
        value = self._resolve(inst.source)
        seq = self._lookup(inst.seq).as_list()
        seq.set(inst.index, value)
        return self.pc + 1

    @execute.register
    def _(self, inst: Copy) -> int:
        self.memory[inst.dest] = self._lookup(inst.source).deep_copy()
        return self.pc + 1

    @execute.register
    def _(self, inst: Chs) -> int:
        self.memory[inst.var] = self._lookup(inst.var).negate()
        return self.pc + 1

    @execute.register
    def _(self, inst: Add) -> int:
        augend = self._lookup(inst.var).as_integer()
        # an undefined operand counts as zero
        addend = self.memory.get(inst.operand, _ZERO).as_integer()
        self.memory[inst.var] = Integer(augend.value + addend.value)
        return self.pc + 1

    @execute.register
    def _(self, inst: If) -> int:
        if self._lookup(inst.var).is_zero_or_empty():
            return inst.target
        return self.pc + 1

    @execute.register
    def _(self, _: Hlt) -> int:
        self.state = State.HALTED
        return self.pc
