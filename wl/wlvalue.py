#!/usr/bin/env python3

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from wlast import IndexOutOfRange, TypeMismatch

class ValueType(Enum):
    Int = 'int'
    List = 'list'

class Value(ABC):
    type: ClassVar[ValueType]

    def as_integer(self) -> 'Integer':
        raise TypeMismatch(f'expected int, got {self.type.value}')

    def as_list(self) -> 'List':
        raise TypeMismatch(f'expected list, got {self.type.value}')

    def negate(self) -> 'Integer':
        return Integer(-self.as_integer().value)

    @abstractmethod
    def is_zero_or_empty(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def deep_copy(self, memo: Optional[dict[int, 'Value']] = None) -> 'Value':
        raise NotImplementedError

@dataclass(frozen=True)
class Integer(Value):
    type: ClassVar[ValueType] = ValueType.Int
    value: int

    def as_integer(self) -> 'Integer':
        return self

    def is_zero_or_empty(self) -> bool:
        return self.value == 0

    def deep_copy(self, memo: Optional[dict[int, Value]] = None) -> 'Integer':
        return self

    def __str__(self) -> str:
        return str(self.value)

@dataclass(eq=False, repr=False)
class List(Value):
    """A list value with reference identity.

    Every variable, and every enclosing list, that holds the same ``List``
    object sees in-place updates made through ``set``. Only ``deep_copy``
    produces a value that shares nothing with the original.

    Nesting depth is unbounded, so the walks over nested lists below keep
    an explicit stack instead of recursing.
    """
    type: ClassVar[ValueType] = ValueType.List
    items: list[Value] = field(default_factory=list)

    def as_list(self) -> 'List':
        return self

    def is_zero_or_empty(self) -> bool:
        return len(self.items) == 0

    def _check_index(self, index: int):
        if not 0 <= index < len(self.items):
            raise IndexOutOfRange(f'index {index} out of range for list of length {len(self.items)}')

    def get(self, index: int) -> Value:
        self._check_index(index)
        return self.items[index]

    def set(self, index: int, value: Value):
        self._check_index(index)
        self.items[index] = value

    def concat(self, other: 'List') -> 'List':
        return List(self.items + other.items)

    def deep_copy(self, memo: Optional[dict[int, Value]] = None) -> 'List':
        if memo is None:
            memo = {}

        def copy_of(seq: 'List') -> 'List':
            try:
                copy = memo[id(seq)]
                assert isinstance(copy, List)
                return copy
            except KeyError:
                pass
            # registered before filling so self-containing lists stay finite
            copy = memo[id(seq)] = List()
            pending.append((seq, copy))
            return copy

        pending: list[tuple[List, List]] = []
        root = copy_of(self)
        while len(pending) > 0:
            seq, copy = pending.pop()
            for item in seq.items:
                if isinstance(item, List):
                    copy.items.append(copy_of(item))
                else:
                    copy.items.append(item.deep_copy(memo))
        return root

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, List):
            return NotImplemented
        # pairs already under comparison are assumed equal, which ends cycles
        seen: set[tuple[int, int]] = set()
        pending = [(self, other)]
        while len(pending) > 0:
            left, right = pending.pop()
            if left is right or (id(left), id(right)) in seen:
                continue
            seen.add((id(left), id(right)))
            if len(left.items) != len(right.items):
                return False
            for l, r in zip(left.items, right.items):
                if isinstance(l, List) and isinstance(r, List):
                    pending.append((l, r))
                elif l != r:
                    return False
        return True

    __hash__ = None  # type: ignore

    def __str__(self) -> str:
        parts = ['[']
        # lists currently open; meeting one again prints [...]
        open_ids = {id(self)}
        pending = [(self, iter(self.items))]
        while len(pending) > 0:
            seq, items = pending[-1]
            item = next(items, None)
            if item is None:
                parts.append(']')
                open_ids.discard(id(seq))
                pending.pop()
                continue
            if parts[-1] != '[':
                parts.append(', ')
            if not isinstance(item, List):
                parts.append(str(item))
            elif id(item) in open_ids:
                parts.append('[...]')
            else:
                parts.append('[')
                open_ids.add(id(item))
                pending.append((item, iter(item.items)))
        return ''.join(parts)

    def __repr__(self) -> str:
        return f'List({self})'
